"""
Test doubles and factories shared by the test modules.
"""

from datetime import datetime, timedelta
from uuid import uuid4

from dungeon_crawl.crud import CreateData
from dungeon_crawl.models.dc_models import RoomType
from dungeon_crawl.models.schema_models import RewardTableSchema, RoomDefinitionSchema


class ScriptedRng:
    """Stand-in for numpy's Generator with scripted draws.

    random() pops the next scripted float; integers() returns the lower bound
    (or a list of zeros when a size is given).
    """

    def __init__(self, rolls=None):
        self.rolls = list(rolls or [])

    def random(self):
        return self.rolls.pop(0)

    def integers(self, low, high=None, size=None, endpoint=False):
        if size is not None:
            return [0] * size
        return low


class TickingClock:
    """Returns a time one second later on every call"""

    def __init__(self, start=datetime(2024, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self):
        self.now = self.now + timedelta(seconds=1)
        return self.now


def make_rewards(**overrides) -> RewardTableSchema:
    values = dict(
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
    values.update(overrides)
    return RewardTableSchema(**values)


def make_room(room_type=RoomType.combat, is_active=True, name="Room") -> RoomDefinitionSchema:
    return RoomDefinitionSchema(
        room_id=uuid4(), name=name, room_type=room_type, is_active=is_active
    )


async def seed(Session, rewards=None, rooms=()):
    """Store a reward table (when given) and room templates"""
    async with Session() as session:
        async with session.begin():
            if rewards is not None:
                await CreateData.add_reward_data(rewards, session)
            for room in rooms:
                await CreateData.add_room_data(room, session)
