"""Outcome rules: map an action and the reward table to a randomized result.

Rule of thumb (same as the rest of the domain layer):
- The random source is always passed in; nothing here touches the process RNG
  except ``default_rng`` which callers may use as the production default.
- No DB sessions, no HTTP, no datetime.now().
"""

import numpy as np

from dungeon_crawl.exceptions import InvalidArgument
from dungeon_crawl.models.dc_models import ActionResult, ActionType
from dungeon_crawl.models.schema_models import RewardTableSchema

COMBAT_VICTORY_CHANCE = 0.5
SEARCH_TREASURE_CUTOFF = 1 / 3
SEARCH_POTION_CUTOFF = 2 / 3

# Process-wide generator used when the caller does not inject one.
_process_rng = np.random.default_rng()


def default_rng() -> np.random.Generator:
    return _process_rng


def random_in_range(rng: np.random.Generator, low: int, high: int) -> int:
    """Draw a uniform integer in [low, high], both endpoints included.

    Args:
        rng (np.random.Generator): Randomness source
        low (int): Lower bound
        high (int): Upper bound, must be >= low

    Returns:
        int: The drawn value, exactly ``low`` when low == high
    """
    if low > high:
        raise ValueError(f"Invalid range: {low} > {high}")
    return int(rng.integers(low, high, endpoint=True))


def resolve_combat(
    rewards: RewardTableSchema, rng: np.random.Generator
) -> tuple[ActionResult, int, int]:
    """Fair coin: victory earns points, defeat costs points and health."""
    if rng.random() < COMBAT_VICTORY_CHANCE:
        points = random_in_range(rng, *rewards.reward_range("combat_victory_points"))
        return ActionResult.victory, points, 0

    points = random_in_range(rng, *rewards.reward_range("combat_defeat_points"))
    health = random_in_range(rng, *rewards.reward_range("combat_defeat_health_loss"))
    return ActionResult.defeat, points, health


def resolve_search(
    rewards: RewardTableSchema, rng: np.random.Generator
) -> tuple[ActionResult, int, int]:
    """One draw split in thirds: treasure, potion, trap."""
    roll = rng.random()
    if roll < SEARCH_TREASURE_CUTOFF:
        points = random_in_range(rng, *rewards.reward_range("treasure_points"))
        return ActionResult.found_treasure, points, 0

    if roll < SEARCH_POTION_CUTOFF:
        health = random_in_range(rng, *rewards.reward_range("potion_health_gain"))
        return ActionResult.found_potion, 0, health

    points = random_in_range(rng, *rewards.reward_range("trap_points"))
    health = random_in_range(rng, *rewards.reward_range("trap_health_loss"))
    return ActionResult.triggered_trap, points, health


def resolve_flee(
    rewards: RewardTableSchema, rng: np.random.Generator
) -> tuple[ActionResult, int, int]:
    points = random_in_range(rng, *rewards.reward_range("flee_points"))
    return ActionResult.escaped, points, 0


def parse_action_type(action_type) -> ActionType:
    """Normalize a raw action type, raising InvalidArgument when unknown."""
    if isinstance(action_type, ActionType):
        return action_type
    try:
        return ActionType(action_type)
    except ValueError:
        raise InvalidArgument(f"Invalid action type: {action_type!r}") from None


def resolve_outcome(
    action_type: ActionType,
    rewards: RewardTableSchema,
    rng: np.random.Generator,
) -> tuple[ActionResult, int, int]:
    """Resolve one player action.

    Args:
        action_type (ActionType): Combat, Search or Flee
        rewards (RewardTableSchema): Snapshot of the active reward table
        rng (np.random.Generator): Randomness source

    Raises:
        InvalidArgument: The action type is not recognized

    Returns:
        tuple[ActionResult, int, int]: Outcome, points change, health change
    """
    action_type = parse_action_type(action_type)
    if action_type == ActionType.combat:
        return resolve_combat(rewards, rng)
    if action_type == ActionType.search:
        return resolve_search(rewards, rng)
    return resolve_flee(rewards, rng)
