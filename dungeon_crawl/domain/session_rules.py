"""Session progression rules independent from HTTP and DB.

Rule of thumb:
- OK: state transitions, clamping, room sequence generation.
- Not OK: touching DB sessions, FastAPI, datetime.now(), the process RNG.
"""

from datetime import datetime
from uuid import UUID

import numpy as np

from dungeon_crawl.models.dc_models import GameStatus
from dungeon_crawl.models.schema_models import SessionSchema

MIN_HEALTH = 0
MAX_HEALTH = 200

TERMINAL_STATUSES = (GameStatus.completed, GameStatus.failed, GameStatus.abandoned)


def clamp_health(health: int) -> int:
    return max(MIN_HEALTH, min(MAX_HEALTH, health))


def is_terminal(status: GameStatus) -> bool:
    return status in TERMINAL_STATUSES


def generate_room_sequence(
    room_ids: list[UUID], room_count: int, rng: np.random.Generator
) -> list[UUID]:
    """Draw ``room_count`` room ids uniformly, with replacement.

    The same room may appear several times in one sequence.

    Args:
        room_ids (list[UUID]): Ids of the active room definitions
        room_count (int): Length of the generated sequence
        rng (np.random.Generator): Randomness source

    Returns:
        list[UUID]: Room ids in visiting order
    """
    if not room_ids:
        raise ValueError("room_ids must not be empty")
    if room_count < 1:
        raise ValueError("room_count must be >= 1")
    picks = rng.integers(0, len(room_ids), size=room_count)
    return [room_ids[int(i)] for i in picks]


def can_continue(session: SessionSchema) -> bool:
    """True while the player can still submit an action to the session."""
    return (
        session.status == GameStatus.in_progress
        and session.current_health > MIN_HEALTH
        and session.current_room_index < session.total_rooms
    )


def apply_outcome(
    session: SessionSchema, points_change: int, health_change: int, now: datetime
) -> SessionSchema:
    """Apply one resolved action to the session state.

    Health is clamped to [0, 200]. Failure is checked before completion, so a
    player who dies in the last room fails the run.

    Args:
        session (SessionSchema): State before the action
        points_change (int): Resolved points delta
        health_change (int): Resolved health delta
        now (datetime): Time of the action

    Returns:
        SessionSchema: New state; ``end_time`` is set when a terminal status is entered
    """
    current_health = clamp_health(session.current_health + health_change)
    current_room_index = session.current_room_index + 1
    status = GameStatus.in_progress
    end_time = None

    if current_health <= MIN_HEALTH:
        status = GameStatus.failed
        end_time = now
    elif current_room_index >= session.total_rooms:
        status = GameStatus.completed
        end_time = now

    return session.model_copy(
        update={
            "score": session.score + points_change,
            "current_health": current_health,
            "current_room_index": current_room_index,
            "status": status,
            "end_time": end_time,
            "last_save_time": now,
        }
    )


def abandon(session: SessionSchema, now: datetime) -> SessionSchema:
    """Abandon an in-progress session. Terminal sessions are returned unchanged."""
    if is_terminal(session.status):
        return session
    return session.model_copy(
        update={
            "status": GameStatus.abandoned,
            "end_time": now,
            "last_save_time": now,
        }
    )
