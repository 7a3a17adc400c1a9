from pydantic import BaseModel, Field, model_validator
from typing import Optional
from uuid import UUID
from datetime import datetime

from dungeon_crawl.models.dc_models import (
    ActionResult,
    ActionType,
    GameStatus,
    RoomType,
)

# Every (min, max) pair of the reward table, by category name.
REWARD_RANGE_NAMES = (
    "combat_victory_points",
    "combat_defeat_points",
    "combat_defeat_health_loss",
    "treasure_points",
    "potion_health_gain",
    "trap_points",
    "trap_health_loss",
    "flee_points",
)


class RewardTableSchema(BaseModel):
    min_combat_victory_points: int
    max_combat_victory_points: int
    min_combat_defeat_points: int
    max_combat_defeat_points: int
    min_combat_defeat_health_loss: int
    max_combat_defeat_health_loss: int
    min_treasure_points: int
    max_treasure_points: int
    min_potion_health_gain: int
    max_potion_health_gain: int
    min_trap_points: int
    max_trap_points: int
    min_trap_health_loss: int
    max_trap_health_loss: int
    min_flee_points: int
    max_flee_points: int
    room_count: int = Field(ge=1)
    starting_health: int = Field(ge=1, le=200)

    class Config:
        from_attributes = True
        frozen = True

    @model_validator(mode="after")
    def check_ranges(self):
        for name in REWARD_RANGE_NAMES:
            low = getattr(self, f"min_{name}")
            high = getattr(self, f"max_{name}")
            if low > high:
                raise ValueError(f"min_{name} ({low}) must not exceed max_{name} ({high})")
        return self

    def reward_range(self, name: str) -> tuple[int, int]:
        """Return the inclusive (min, max) pair for a reward category"""
        return getattr(self, f"min_{name}"), getattr(self, f"max_{name}")


class RoomDefinitionSchema(BaseModel):
    room_id: UUID
    name: str
    description: str = ""
    room_type: RoomType
    is_active: bool = True

    class Config:
        from_attributes = True


class SessionSchema(BaseModel):
    session_id: UUID
    player_id: UUID
    generated_room_ids: list[UUID]
    total_rooms: int
    current_room_index: int
    score: int
    current_health: int
    status: GameStatus
    start_time: datetime
    end_time: Optional[datetime] = None
    last_save_time: datetime

    class Config:
        from_attributes = True


class ActionSchema(BaseModel):
    action_id: UUID
    session_id: UUID
    action_type: ActionType
    result: ActionResult
    points_change: int
    health_change: int
    room_number: int
    timestamp: datetime

    class Config:
        from_attributes = True


class ActionResponseModel(BaseModel):
    action: ActionSchema
    updated_session: SessionSchema
