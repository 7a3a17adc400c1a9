from sqlalchemy.orm import DeclarativeBase, relationship
from sqlalchemy.schema import Column, ForeignKey
from sqlalchemy.types import JSON, Boolean, DateTime, Integer, String, Uuid
from uuid6 import uuid7
from datetime import datetime


class Base(DeclarativeBase):
    pass


class GameRewards(Base):
    """Admin-configured reward ranges. Only the first row by created_at is active."""

    __tablename__ = "game_rewards"
    rewards_id = Column(Uuid, primary_key=True, default=uuid7)
    min_combat_victory_points = Column(Integer, nullable=False)
    max_combat_victory_points = Column(Integer, nullable=False)
    min_combat_defeat_points = Column(Integer, nullable=False)
    max_combat_defeat_points = Column(Integer, nullable=False)
    min_combat_defeat_health_loss = Column(Integer, nullable=False)
    max_combat_defeat_health_loss = Column(Integer, nullable=False)
    min_treasure_points = Column(Integer, nullable=False)
    max_treasure_points = Column(Integer, nullable=False)
    min_potion_health_gain = Column(Integer, nullable=False)
    max_potion_health_gain = Column(Integer, nullable=False)
    min_trap_points = Column(Integer, nullable=False)
    max_trap_points = Column(Integer, nullable=False)
    min_trap_health_loss = Column(Integer, nullable=False)
    max_trap_health_loss = Column(Integer, nullable=False)
    min_flee_points = Column(Integer, nullable=False)
    max_flee_points = Column(Integer, nullable=False)
    room_count = Column(Integer, nullable=False)
    starting_health = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.now)


class RoomTemplate(Base):
    __tablename__ = "room_template"
    room_id = Column(Uuid, primary_key=True, default=uuid7)
    name = Column(String(100), nullable=False)
    description = Column(String(1000), nullable=False, default="")
    room_type = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)


class GameSession(Base):
    __tablename__ = "game_session"
    session_id = Column(Uuid, primary_key=True, default=uuid7)
    player_id = Column(Uuid, nullable=False, index=True)
    generated_room_ids = Column(JSON, nullable=False)
    total_rooms = Column(Integer, nullable=False)
    current_room_index = Column(Integer, nullable=False, default=0)
    score = Column(Integer, nullable=False, default=0)
    current_health = Column(Integer, nullable=False)
    status = Column(String, nullable=False)
    start_time = Column(DateTime, default=datetime.now)
    end_time = Column(DateTime, nullable=True)
    last_save_time = Column(DateTime, default=datetime.now)

    actions = relationship(
        "GameAction",
        back_populates="session",
        cascade="all, delete",
    )


class GameAction(Base):
    __tablename__ = "game_action"
    action_id = Column(Uuid, primary_key=True, default=uuid7)
    session_id = Column(
        Uuid, ForeignKey("game_session.session_id"), nullable=False, index=True
    )
    action_type = Column(String, nullable=False)
    result = Column(String, nullable=False)
    points_change = Column(Integer, nullable=False)
    health_change = Column(Integer, nullable=False)
    room_number = Column(Integer, nullable=False)
    timestamp = Column(DateTime, default=datetime.now)

    session = relationship("GameSession", back_populates="actions")
