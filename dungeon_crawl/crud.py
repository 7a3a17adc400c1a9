"""CRUD helpers over the game tables.

Helpers here never commit: the service layer owns transaction boundaries
(``async with session.begin()``). The ``create_default_*`` seeders are the
exception and commit on their own, they run once at startup.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from typing import List
from pydantic import ValidationError
import logging

from dungeon_crawl.exceptions import PreconditionFailed
from dungeon_crawl.models.dc_models import GameStatus
from dungeon_crawl.models.schema_models import (
    ActionSchema,
    RewardTableSchema,
    RoomDefinitionSchema,
    SessionSchema,
)
from dungeon_crawl.models.schemas import (
    GameAction,
    GameRewards,
    GameSession,
    RoomTemplate,
)
from uuid import UUID


class ReadData:
    @staticmethod
    async def read_active_reward_row(
        session: AsyncSession, for_update: bool = False
    ) -> GameRewards | None:
        """Read the active reward table row (the first one created)

        Args:
            session (AsyncSession): AsyncSession object to interact with database
            for_update (bool): Lock the row until the transaction ends
        """
        stmt = (
            select(GameRewards)
            .order_by(GameRewards.created_at, GameRewards.rewards_id)
            .limit(1)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await session.execute(stmt)
        return result.scalars().first()

    @staticmethod
    async def read_active_reward_data(session: AsyncSession) -> RewardTableSchema | None:
        """Read a frozen snapshot of the active reward table

        Raises:
            PreconditionFailed: The stored table breaks the reward table rules

        Returns:
            RewardTableSchema: Reward ranges, or None when the game is not configured
        """
        try:
            result = await ReadData.read_active_reward_row(session)
            if result is None:
                return None
            return RewardTableSchema.model_validate(result)
        except ValidationError as e:
            logging.error(f"Stored reward table is invalid: {e}")
            raise PreconditionFailed("Game rewards misconfigured") from e
        except Exception as e:
            logging.error(f"Failed to read reward data: {e}")
            raise

    @staticmethod
    async def read_active_rooms(session: AsyncSession) -> List[RoomDefinitionSchema]:
        """Read every active room template

        Returns:
            List[RoomDefinitionSchema]: Active rooms, possibly empty
        """
        try:
            stmt = (
                select(RoomTemplate)
                .where(RoomTemplate.is_active.is_(True))
                .order_by(RoomTemplate.room_id)
            )
            result = await session.execute(stmt)
            return [
                RoomDefinitionSchema.model_validate(room)
                for room in result.scalars().all()
            ]
        except Exception as e:
            logging.error(f"Failed to read active rooms: {e}")
            raise

    @staticmethod
    async def read_session_row(
        session_id: UUID, session: AsyncSession, for_update: bool = False
    ) -> GameSession | None:
        """Read the session row, optionally locking it (SELECT ... FOR UPDATE)

        Args:
            session_id (UUID): To identify the game session
            for_update (bool): Lock the row until the transaction ends
        """
        stmt = select(GameSession).where(GameSession.session_id == session_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await session.execute(stmt)
        return result.scalars().first()

    @staticmethod
    async def read_session_data(session_id: UUID, session: AsyncSession) -> SessionSchema | None:
        try:
            result = await ReadData.read_session_row(session_id, session)
            if result is None:
                return None
            return SessionSchema.model_validate(result)
        except Exception as e:
            logging.error(f"Failed to read session data: {e}")
            raise

    @staticmethod
    async def read_player_sessions(player_id: UUID, session: AsyncSession) -> List[SessionSchema]:
        """Read every session of a player, newest first

        Args:
            player_id (UUID): To identify the player
        """
        try:
            stmt = (
                select(GameSession)
                .where(GameSession.player_id == player_id)
                .order_by(desc(GameSession.start_time), desc(GameSession.session_id))
            )
            result = await session.execute(stmt)
            return [SessionSchema.model_validate(row) for row in result.scalars().all()]
        except Exception as e:
            logging.error(f"Failed to read player sessions: {e}")
            raise

    @staticmethod
    async def read_player_current_session(
        player_id: UUID, session: AsyncSession
    ) -> SessionSchema | None:
        """Read the latest in-progress session of a player"""
        try:
            stmt = (
                select(GameSession)
                .where(GameSession.player_id == player_id)
                .where(GameSession.status == GameStatus.in_progress.value)
                .order_by(desc(GameSession.start_time), desc(GameSession.session_id))
                .limit(1)
            )
            result = await session.execute(stmt)
            result = result.scalars().first()
            if result is None:
                return None
            return SessionSchema.model_validate(result)
        except Exception as e:
            logging.error(f"Failed to read current session: {e}")
            raise

    @staticmethod
    async def read_session_actions(session_id: UUID, session: AsyncSession) -> List[ActionSchema]:
        """Read the action log of a session in the order the actions were taken

        Args:
            session_id (UUID): To identify the game session

        Returns:
            List[ActionSchema]: Actions ordered by room number, which grows with every append
        """
        try:
            stmt = (
                select(GameAction)
                .where(GameAction.session_id == session_id)
                .order_by(GameAction.room_number, GameAction.timestamp)
            )
            result = await session.execute(stmt)
            return [ActionSchema.model_validate(row) for row in result.scalars().all()]
        except Exception as e:
            logging.error(f"Failed to read session actions: {e}")
            raise

    @staticmethod
    async def read_action_data(action_id: UUID, session: AsyncSession) -> ActionSchema | None:
        try:
            stmt = select(GameAction).where(GameAction.action_id == action_id)
            result = await session.execute(stmt)
            result = result.scalars().first()
            if result is None:
                return None
            return ActionSchema.model_validate(result)
        except Exception as e:
            logging.error(f"Failed to read action data: {e}")
            raise


class CreateData:
    @staticmethod
    async def add_session_data(game_session: SessionSchema, session: AsyncSession):
        """Add a new game session row (no commit)

        Args:
            game_session (SessionSchema): Freshly created session state
            session (AsyncSession): AsyncSession object to interact with database
        """
        new_session = GameSession(
            session_id=game_session.session_id,
            player_id=game_session.player_id,
            generated_room_ids=[str(room_id) for room_id in game_session.generated_room_ids],
            total_rooms=game_session.total_rooms,
            current_room_index=game_session.current_room_index,
            score=game_session.score,
            current_health=game_session.current_health,
            status=game_session.status.value,
            start_time=game_session.start_time,
            end_time=game_session.end_time,
            last_save_time=game_session.last_save_time,
        )
        session.add(new_session)
        await session.flush()

    @staticmethod
    async def add_action_data(action: ActionSchema, session: AsyncSession):
        """Append an action to the log (no commit). Actions are never updated."""
        new_action = GameAction(
            action_id=action.action_id,
            session_id=action.session_id,
            action_type=action.action_type.value,
            result=action.result.value,
            points_change=action.points_change,
            health_change=action.health_change,
            room_number=action.room_number,
            timestamp=action.timestamp,
        )
        session.add(new_action)
        await session.flush()

    @staticmethod
    async def add_reward_data(rewards: RewardTableSchema, session: AsyncSession) -> GameRewards:
        new_rewards = GameRewards()
        UpdateData.copy_reward_fields(new_rewards, rewards)
        session.add(new_rewards)
        await session.flush()
        return new_rewards

    @staticmethod
    async def add_room_data(room: RoomDefinitionSchema, session: AsyncSession):
        new_room = RoomTemplate(
            room_id=room.room_id,
            name=room.name,
            description=room.description,
            room_type=room.room_type.value,
            is_active=room.is_active,
        )
        session.add(new_room)
        await session.flush()

    @staticmethod
    async def create_default_reward_data(rewards: RewardTableSchema, session: AsyncSession):
        """Create the default reward table when none is configured yet

        Args:
            rewards (RewardTableSchema): Default reward ranges
        """
        async with session:
            try:
                existing = await ReadData.read_active_reward_row(session)
                if existing is None:
                    await CreateData.add_reward_data(rewards, session)
                    await session.commit()
                    logging.info("Created default reward table")
            except Exception as e:
                logging.error(f"Failed to create default reward data: {e}")
                raise

    @staticmethod
    async def create_default_room_data(room: RoomDefinitionSchema, session: AsyncSession):
        """Create a default room template if its id is not stored yet

        Args:
            room (RoomDefinitionSchema): Room template to seed
        """
        async with session:
            try:
                result = await session.execute(
                    select(RoomTemplate).where(RoomTemplate.room_id == room.room_id)
                )
                room_data = result.scalars().first()
                if not room_data:
                    await CreateData.add_room_data(room, session)
                    await session.commit()
                    logging.info(f"Created default room template: {room.name}")
            except Exception as e:
                logging.error(f"Failed to create default room data: {e}")
                raise


class UpdateData:
    @staticmethod
    def set_session_state_no_commit(row: GameSession, state: SessionSchema):
        """Write the mutable session fields back onto a loaded row

        Args:
            row (GameSession): Row loaded in the current transaction
            state (SessionSchema): New session state
        """
        row.current_room_index = state.current_room_index
        row.score = state.score
        row.current_health = state.current_health
        row.status = state.status.value
        row.end_time = state.end_time
        row.last_save_time = state.last_save_time

    @staticmethod
    def copy_reward_fields(row: GameRewards, rewards: RewardTableSchema) -> GameRewards:
        """Copy every reward table field onto the row, one by one

        Adding a field to RewardTableSchema requires adding it here too;
        the tests compare this copy against the schema's field list.
        """
        row.min_combat_victory_points = rewards.min_combat_victory_points
        row.max_combat_victory_points = rewards.max_combat_victory_points
        row.min_combat_defeat_points = rewards.min_combat_defeat_points
        row.max_combat_defeat_points = rewards.max_combat_defeat_points
        row.min_combat_defeat_health_loss = rewards.min_combat_defeat_health_loss
        row.max_combat_defeat_health_loss = rewards.max_combat_defeat_health_loss
        row.min_treasure_points = rewards.min_treasure_points
        row.max_treasure_points = rewards.max_treasure_points
        row.min_potion_health_gain = rewards.min_potion_health_gain
        row.max_potion_health_gain = rewards.max_potion_health_gain
        row.min_trap_points = rewards.min_trap_points
        row.max_trap_points = rewards.max_trap_points
        row.min_trap_health_loss = rewards.min_trap_health_loss
        row.max_trap_health_loss = rewards.max_trap_health_loss
        row.min_flee_points = rewards.min_flee_points
        row.max_flee_points = rewards.max_flee_points
        row.room_count = rewards.room_count
        row.starting_health = rewards.starting_health
        return row

    @staticmethod
    async def update_reward_data(
        rewards: RewardTableSchema, session: AsyncSession
    ) -> RewardTableSchema | None:
        """Overwrite the active reward table (no commit)

        Returns:
            RewardTableSchema: Updated table, or None when no table exists
        """
        try:
            row = await ReadData.read_active_reward_row(session, for_update=True)
            if row is None:
                return None
            UpdateData.copy_reward_fields(row, rewards)
            await session.flush()
            return RewardTableSchema.model_validate(row)
        except Exception as e:
            logging.error(f"Failed to update reward data: {e}")
            raise
