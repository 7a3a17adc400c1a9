import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status

from dungeon_crawl.db import Session
from dungeon_crawl.exceptions import (
    GameEngineError,
    InvalidArgument,
    InvalidState,
    NotFound,
    PreconditionFailed,
)
from dungeon_crawl.models.dc_models import PerformActionModel, StartGameModel
from dungeon_crawl.models.schema_models import (
    ActionResponseModel,
    ActionSchema,
    SessionSchema,
)
from dungeon_crawl.services.game_db import SessionLifecycleManager

game_router = APIRouter(prefix="/sessions")
lifecycle_manager = SessionLifecycleManager(Session)

ERROR_STATUS = {
    NotFound: status.HTTP_404_NOT_FOUND,
    PreconditionFailed: status.HTTP_409_CONFLICT,
    InvalidArgument: 422,
    InvalidState: status.HTTP_400_BAD_REQUEST,
}


def get_lifecycle_manager() -> SessionLifecycleManager:
    return lifecycle_manager


def to_http_exception(error: GameEngineError) -> HTTPException:
    """Translate an engine error into the HTTP status the client sees"""
    status_code = ERROR_STATUS.get(type(error), status.HTTP_500_INTERNAL_SERVER_ERROR)
    logging.info(f"{type(error).__name__}: {error}")
    return HTTPException(status_code=status_code, detail=str(error))


class GameSessionAPI:
    @staticmethod
    @game_router.post(
        "/start", response_model=SessionSchema, status_code=status.HTTP_201_CREATED
    )
    async def start_new_game(
        request: StartGameModel,
        manager: SessionLifecycleManager = Depends(get_lifecycle_manager),
    ) -> SessionSchema:
        """Start a new game session for the player

        Args:
            request (StartGameModel): player_id of the player starting the run

        Returns:
            SessionSchema: The created session
        """
        try:
            return await manager.create_session(request.player_id)
        except GameEngineError as e:
            raise to_http_exception(e)

    @staticmethod
    @game_router.get("/player/{player_id}", response_model=List[SessionSchema])
    async def get_player_sessions(
        player_id: UUID,
        manager: SessionLifecycleManager = Depends(get_lifecycle_manager),
    ):
        return await manager.list_player_sessions(player_id)

    @staticmethod
    @game_router.get("/player/{player_id}/current", response_model=SessionSchema)
    async def get_player_current_session(
        player_id: UUID,
        manager: SessionLifecycleManager = Depends(get_lifecycle_manager),
    ):
        game_session = await manager.get_player_current_session(player_id)
        if game_session is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No session in progress.",
            )
        return game_session

    @staticmethod
    @game_router.get("/{session_id}", response_model=SessionSchema)
    async def get_session(
        session_id: UUID,
        manager: SessionLifecycleManager = Depends(get_lifecycle_manager),
    ):
        try:
            return await manager.get_session(session_id)
        except GameEngineError as e:
            raise to_http_exception(e)

    @staticmethod
    @game_router.post("/{session_id}/action", response_model=ActionResponseModel)
    async def perform_action(
        session_id: UUID,
        request: PerformActionModel,
        manager: SessionLifecycleManager = Depends(get_lifecycle_manager),
    ) -> ActionResponseModel:
        """Resolve one action in the session's current room

        Args:
            session_id (UUID): To identify the game session
            request (PerformActionModel): Combat, Search or Flee

        Returns:
            ActionResponseModel: The recorded action and the session after it
        """
        try:
            game_session = await manager.get_session(session_id)
            if not manager.can_continue(game_session):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Session cannot continue.",
                )
            action = await manager.process_action(session_id, request.action_type)
            updated_session = await manager.get_session(session_id)
        except GameEngineError as e:
            raise to_http_exception(e)

        return ActionResponseModel(action=action, updated_session=updated_session)

    @staticmethod
    @game_router.post("/{session_id}/abandon", status_code=status.HTTP_204_NO_CONTENT)
    async def abandon_session(
        session_id: UUID,
        manager: SessionLifecycleManager = Depends(get_lifecycle_manager),
    ):
        if not await manager.abandon_session(session_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Session not found.",
            )
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @staticmethod
    @game_router.get("/{session_id}/actions", response_model=List[ActionSchema])
    async def get_session_actions(
        session_id: UUID,
        manager: SessionLifecycleManager = Depends(get_lifecycle_manager),
    ):
        return await manager.list_actions(session_id)
