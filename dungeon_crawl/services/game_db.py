"""DB service layer for game-session use cases.

- Routers should not touch DB sessions directly; they call this module.
- This layer owns session/transaction boundaries.
- Use CRUD helpers that do NOT commit inside session.begin().
- Writes to one game session are serialized: an in-process lock per session id
  plus SELECT ... FOR UPDATE on the row.
"""

import logging
from datetime import datetime, timezone
from typing import Callable
from uuid import UUID

import numpy as np
from sqlalchemy.ext.asyncio import async_sessionmaker
from uuid6 import uuid7

from dungeon_crawl.crud import CreateData, ReadData, UpdateData
from dungeon_crawl.domain.outcome_rules import (
    default_rng,
    parse_action_type,
    resolve_outcome,
)
from dungeon_crawl.domain.session_rules import (
    abandon,
    apply_outcome,
    can_continue,
    generate_room_sequence,
    is_terminal,
)
from dungeon_crawl.exceptions import (
    InvalidState,
    NotFound,
    PreconditionFailed,
)
from dungeon_crawl.models.dc_models import ActionType, GameStatus
from dungeon_crawl.models.schema_models import (
    ActionSchema,
    RewardTableSchema,
    SessionSchema,
)
from dungeon_crawl.session_lock import SessionLockManager


def utc_now() -> datetime:
    """Current UTC time without tzinfo, as stored in the DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SessionLifecycleManager:
    """Creates game sessions, resolves player actions and ends sessions."""

    def __init__(
        self,
        Session: async_sessionmaker,
        rng: np.random.Generator | None = None,
        clock: Callable[[], datetime] = utc_now,
        lock_manager: SessionLockManager | None = None,
    ):
        """Initialize the manager with its collaborators.

        Args:
            Session (async_sessionmaker): Factory of database sessions
            rng (np.random.Generator | None): Randomness source, the process-wide generator by default
            clock (Callable[[], datetime]): Returns the current time, naive UTC by default
            lock_manager (SessionLockManager | None): Per-session locks, shared by every caller of this manager
        """
        self.Session: async_sessionmaker = Session
        self.rng: np.random.Generator = rng if rng is not None else default_rng()
        self.clock = clock
        self.lock_manager: SessionLockManager = lock_manager or SessionLockManager()

    @staticmethod
    def can_continue(game_session: SessionSchema) -> bool:
        return can_continue(game_session)

    async def create_session(self, player_id: UUID) -> SessionSchema:
        """Start a new run for the player with a freshly drawn room sequence

        Args:
            player_id (UUID): To identify the player

        Raises:
            PreconditionFailed: No reward table, or no active room template

        Returns:
            SessionSchema: The stored session, in progress at room index 0
        """
        async with self.Session() as session:
            async with session.begin():
                rewards = await ReadData.read_active_reward_data(session)
                if rewards is None:
                    raise PreconditionFailed("Game rewards not configured")

                rooms = await ReadData.read_active_rooms(session)
                if not rooms:
                    raise PreconditionFailed("No room templates available")

                room_ids = generate_room_sequence(
                    [room.room_id for room in rooms], rewards.room_count, self.rng
                )
                now = self.clock()
                game_session = SessionSchema(
                    session_id=uuid7(),
                    player_id=player_id,
                    generated_room_ids=room_ids,
                    total_rooms=len(room_ids),
                    current_room_index=0,
                    score=0,
                    current_health=rewards.starting_health,
                    status=GameStatus.in_progress,
                    start_time=now,
                    end_time=None,
                    last_save_time=now,
                )
                await CreateData.add_session_data(game_session, session)

        logging.info(
            f"Created session {game_session.session_id} for player {player_id} "
            f"with {game_session.total_rooms} rooms"
        )
        return game_session

    async def process_action(self, session_id: UUID, action_type: ActionType | str) -> ActionSchema:
        """Resolve one player action and apply it to the session

        The read-modify-write of the session and the append to the action log
        happen in one transaction, serialized per session id.

        Args:
            session_id (UUID): To identify the game session
            action_type (ActionType | str): Combat, Search or Flee

        Raises:
            NotFound: The session does not exist
            PreconditionFailed: No reward table is configured
            InvalidArgument: The action type is not recognized
            InvalidState: The session cannot continue

        Returns:
            ActionSchema: The recorded action
        """
        async with self.lock_manager.hold(session_id):
            async with self.Session() as session:
                async with session.begin():
                    row = await ReadData.read_session_row(session_id, session, for_update=True)
                    if row is None:
                        raise NotFound(f"Session not found: {session_id}")

                    rewards = await ReadData.read_active_reward_data(session)
                    if rewards is None:
                        raise PreconditionFailed("Game rewards not configured")

                    action_type = parse_action_type(action_type)
                    before = SessionSchema.model_validate(row)
                    if not can_continue(before):
                        raise InvalidState(
                            f"Session {session_id} cannot continue (status={before.status.value})"
                        )

                    result, points_change, health_change = resolve_outcome(
                        action_type, rewards, self.rng
                    )
                    now = self.clock()
                    after = apply_outcome(before, points_change, health_change, now)
                    UpdateData.set_session_state_no_commit(row, after)

                    action = ActionSchema(
                        action_id=uuid7(),
                        session_id=session_id,
                        action_type=action_type,
                        result=result,
                        points_change=points_change,
                        health_change=health_change,
                        room_number=before.current_room_index + 1,
                        timestamp=now,
                    )
                    await CreateData.add_action_data(action, session)

        logging.info(
            f"Session {session_id} room {action.room_number}: {action_type.value} -> "
            f"{result.value} (points {points_change:+d}, health {health_change:+d})"
        )
        if is_terminal(after.status):
            logging.info(
                f"Session {session_id} ended with status {after.status.value}, score {after.score}"
            )
        return action

    async def abandon_session(self, session_id: UUID) -> bool:
        """Mark an in-progress session as abandoned

        A session that already ended keeps its status and end time.

        Args:
            session_id (UUID): To identify the game session

        Returns:
            bool: False when the session does not exist
        """
        async with self.lock_manager.hold(session_id):
            async with self.Session() as session:
                async with session.begin():
                    row = await ReadData.read_session_row(session_id, session, for_update=True)
                    if row is None:
                        logging.info(f"Abandon ignored, session not found: {session_id}")
                        return False

                    before = SessionSchema.model_validate(row)
                    if is_terminal(before.status):
                        logging.info(
                            f"Session {session_id} already ended ({before.status.value}), left unchanged"
                        )
                        return True

                    UpdateData.set_session_state_no_commit(row, abandon(before, self.clock()))

        logging.info(f"Session {session_id} abandoned")
        return True

    async def get_session(self, session_id: UUID) -> SessionSchema:
        async with self.Session() as session:
            game_session = await ReadData.read_session_data(session_id, session)
        if game_session is None:
            raise NotFound(f"Session not found: {session_id}")
        return game_session

    async def list_player_sessions(self, player_id: UUID) -> list[SessionSchema]:
        async with self.Session() as session:
            return await ReadData.read_player_sessions(player_id, session)

    async def get_player_current_session(self, player_id: UUID) -> SessionSchema | None:
        async with self.Session() as session:
            return await ReadData.read_player_current_session(player_id, session)

    async def list_actions(self, session_id: UUID) -> list[ActionSchema]:
        async with self.Session() as session:
            return await ReadData.read_session_actions(session_id, session)

    async def get_action(self, action_id: UUID) -> ActionSchema:
        async with self.Session() as session:
            action = await ReadData.read_action_data(action_id, session)
        if action is None:
            raise NotFound(f"Action not found: {action_id}")
        return action

    async def update_reward_config(self, rewards: RewardTableSchema) -> RewardTableSchema:
        """Overwrite the active reward table; running sessions use it from their next action

        Raises:
            PreconditionFailed: No reward table exists yet
        """
        async with self.Session() as session:
            async with session.begin():
                updated = await UpdateData.update_reward_data(rewards, session)
                if updated is None:
                    raise PreconditionFailed("Game rewards not configured")
        logging.info("Reward table updated")
        return updated
