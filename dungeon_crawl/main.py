import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager
from uuid import UUID

from dungeon_crawl.crud import CreateData
from dungeon_crawl.db import Session, engine
from dungeon_crawl.load_secrets import log_level, seed_defaults
from dungeon_crawl.models.dc_models import RoomType
from dungeon_crawl.models.schema_models import RewardTableSchema, RoomDefinitionSchema
from dungeon_crawl.models.schemas import Base
from dungeon_crawl.routers import game

logging.basicConfig(level=getattr(logging, log_level, logging.INFO))

create_data = CreateData()

DEFAULT_REWARDS = RewardTableSchema(
    min_combat_victory_points=80,
    max_combat_victory_points=120,
    min_combat_defeat_points=-60,
    max_combat_defeat_points=-40,
    min_combat_defeat_health_loss=-40,
    max_combat_defeat_health_loss=-20,
    min_treasure_points=60,
    max_treasure_points=90,
    min_potion_health_gain=30,
    max_potion_health_gain=50,
    min_trap_points=-35,
    max_trap_points=-15,
    min_trap_health_loss=-30,
    max_trap_health_loss=-10,
    min_flee_points=-20,
    max_flee_points=-10,
    room_count=5,
    starting_health=100,
)

DEFAULT_ROOMS = [
    RoomDefinitionSchema(
        room_id=UUID("00000000-0000-0000-0000-000000000003"),
        name="Ferocious goblin",
        description=(
            "A red-eyed goblin leaps in front of you, brandishing a rusty sword. "
            "It growls and blocks your way. Will you fight it?"
        ),
        room_type=RoomType.combat,
    ),
    RoomDefinitionSchema(
        room_id=UUID("00000000-0000-0000-0000-000000000009"),
        name="Mysterious chest",
        description=(
            "A wooden chest carved with ancient runes sits in the middle of the room. "
            "It could hold a treasure... or a deadly trap."
        ),
        room_type=RoomType.search,
    ),
]


@asynccontextmanager
async def lifespan(app):
    """Create the tables and the default game configuration.
    This function is called to start the server.
    """
    async with engine.begin() as conn:
        # Existing tables are skipped
        await conn.run_sync(Base.metadata.create_all)

    if seed_defaults:
        await create_data.create_default_reward_data(DEFAULT_REWARDS, Session())
        for room in DEFAULT_ROOMS:
            await create_data.create_default_room_data(room, Session())

    try:
        yield
    finally:
        await engine.dispose()
        logging.info("Stop Server")


app = FastAPI(lifespan=lifespan)
app.include_router(game.game_router)
