"""
Tests for reward table validation and the field-by-field update.
"""

import pytest
from pydantic import ValidationError

from dungeon_crawl.crud import UpdateData
from dungeon_crawl.models.schema_models import REWARD_RANGE_NAMES, RewardTableSchema
from dungeon_crawl.models.schemas import GameRewards
from tests.helpers import make_rewards


def distinct_rewards() -> RewardTableSchema:
    """A table where every field holds a different value"""
    values = {}
    for i, name in enumerate(REWARD_RANGE_NAMES):
        values[f"min_{name}"] = i * 10
        values[f"max_{name}"] = i * 10 + 5
    values["room_count"] = 7
    values["starting_health"] = 150
    return RewardTableSchema(**values)


class TestRewardTableSchema:
    def test_defaults_are_valid(self):
        rewards = make_rewards()
        assert rewards.reward_range("flee_points") == (-20, -10)

    @pytest.mark.parametrize("name", REWARD_RANGE_NAMES)
    def test_min_above_max_rejected(self, name):
        low, _ = make_rewards().reward_range(name)
        with pytest.raises(ValidationError):
            make_rewards(**{f"max_{name}": low - 1})

    def test_equal_bounds_allowed(self):
        rewards = make_rewards(min_trap_points=-20, max_trap_points=-20)
        assert rewards.reward_range("trap_points") == (-20, -20)

    @pytest.mark.parametrize("room_count", [0, -1])
    def test_room_count_must_be_positive(self, room_count):
        with pytest.raises(ValidationError):
            make_rewards(room_count=room_count)

    @pytest.mark.parametrize("starting_health", [0, 201])
    def test_starting_health_bounds(self, starting_health):
        with pytest.raises(ValidationError):
            make_rewards(starting_health=starting_health)

    def test_snapshot_is_frozen(self):
        rewards = make_rewards()
        with pytest.raises(ValidationError):
            rewards.room_count = 9


class TestCopyRewardFields:
    def test_every_field_is_copied(self):
        rewards = distinct_rewards()
        row = UpdateData.copy_reward_fields(GameRewards(), rewards)
        for name in RewardTableSchema.model_fields:
            assert getattr(row, name) == getattr(rewards, name), name

    def test_overwrites_previous_values(self):
        row = UpdateData.copy_reward_fields(GameRewards(), make_rewards())
        UpdateData.copy_reward_fields(row, distinct_rewards())
        assert RewardTableSchema.model_validate(row) == distinct_rewards()
