"""
HTTP tests for the /sessions routes, with the lifecycle manager mocked out.
"""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from dungeon_crawl.domain.session_rules import can_continue
from dungeon_crawl.exceptions import (
    InvalidArgument,
    InvalidState,
    NotFound,
    PreconditionFailed,
)
from dungeon_crawl.main import app
from dungeon_crawl.models.dc_models import ActionResult, ActionType, GameStatus
from dungeon_crawl.models.schema_models import ActionSchema, SessionSchema
from dungeon_crawl.routers.game import ERROR_STATUS, get_lifecycle_manager

NOW = datetime(2024, 1, 1, 12, 0, 0)


def make_session(**overrides) -> SessionSchema:
    values = dict(
        session_id=uuid4(),
        player_id=uuid4(),
        generated_room_ids=[uuid4(), uuid4()],
        total_rooms=2,
        current_room_index=0,
        score=0,
        current_health=100,
        status=GameStatus.in_progress,
        start_time=NOW,
        end_time=None,
        last_save_time=NOW,
    )
    values.update(overrides)
    return SessionSchema(**values)


def make_action(session_id) -> ActionSchema:
    return ActionSchema(
        action_id=uuid4(),
        session_id=session_id,
        action_type=ActionType.flee,
        result=ActionResult.escaped,
        points_change=-15,
        health_change=0,
        room_number=1,
        timestamp=NOW,
    )


@pytest.fixture
def manager():
    mock = MagicMock()
    mock.can_continue.side_effect = can_continue
    for name in (
        "create_session",
        "process_action",
        "abandon_session",
        "get_session",
        "list_player_sessions",
        "get_player_current_session",
        "list_actions",
    ):
        setattr(mock, name, AsyncMock())
    app.dependency_overrides[get_lifecycle_manager] = lambda: mock
    yield mock
    app.dependency_overrides.clear()


@pytest.fixture
def client(manager):
    return TestClient(app)


class TestStartGame:
    def test_created(self, client, manager):
        game_session = make_session()
        manager.create_session.return_value = game_session

        response = client.post("/sessions/start", json={"player_id": str(game_session.player_id)})

        assert response.status_code == 201
        assert response.json()["session_id"] == str(game_session.session_id)
        assert response.json()["status"] == "InProgress"
        manager.create_session.assert_awaited_once_with(game_session.player_id)

    def test_not_configured(self, client, manager):
        manager.create_session.side_effect = PreconditionFailed("No room templates available")

        response = client.post("/sessions/start", json={"player_id": str(uuid4())})

        assert response.status_code == 409
        assert response.json()["detail"] == "No room templates available"

    def test_invalid_player_id(self, client, manager):
        response = client.post("/sessions/start", json={"player_id": "not-a-uuid"})

        assert response.status_code == 422
        manager.create_session.assert_not_awaited()


class TestReadSessions:
    def test_get_session(self, client, manager):
        game_session = make_session()
        manager.get_session.return_value = game_session

        response = client.get(f"/sessions/{game_session.session_id}")

        assert response.status_code == 200
        assert response.json()["current_health"] == 100

    def test_get_missing_session(self, client, manager):
        manager.get_session.side_effect = NotFound("Session not found")

        assert client.get(f"/sessions/{uuid4()}").status_code == 404

    def test_player_history(self, client, manager):
        player_id = uuid4()
        manager.list_player_sessions.return_value = [
            make_session(player_id=player_id),
            make_session(player_id=player_id),
        ]

        response = client.get(f"/sessions/player/{player_id}")

        assert response.status_code == 200
        assert len(response.json()) == 2

    def test_player_current_session(self, client, manager):
        game_session = make_session()
        manager.get_player_current_session.return_value = game_session

        response = client.get(f"/sessions/player/{game_session.player_id}/current")

        assert response.status_code == 200
        assert response.json()["session_id"] == str(game_session.session_id)

    def test_player_without_current_session(self, client, manager):
        manager.get_player_current_session.return_value = None

        assert client.get(f"/sessions/player/{uuid4()}/current").status_code == 404

    def test_action_log(self, client, manager):
        session_id = uuid4()
        manager.list_actions.return_value = [make_action(session_id)]

        response = client.get(f"/sessions/{session_id}/actions")

        assert response.status_code == 200
        assert response.json()[0]["result"] == "Escaped"


class TestPerformAction:
    def test_action_returns_updated_session(self, client, manager):
        before = make_session()
        after = make_session(session_id=before.session_id, current_room_index=1, score=-15)
        action = make_action(before.session_id)
        manager.get_session.side_effect = [before, after]
        manager.process_action.return_value = action

        response = client.post(
            f"/sessions/{before.session_id}/action", json={"action_type": "Flee"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["action"]["action_id"] == str(action.action_id)
        assert body["updated_session"]["current_room_index"] == 1
        assert body["updated_session"]["score"] == -15
        manager.process_action.assert_awaited_once_with(before.session_id, ActionType.flee)

    def test_finished_session(self, client, manager):
        finished = make_session(status=GameStatus.completed, current_room_index=2, end_time=NOW)
        manager.get_session.return_value = finished

        response = client.post(
            f"/sessions/{finished.session_id}/action", json={"action_type": "Combat"}
        )

        assert response.status_code == 400
        manager.process_action.assert_not_awaited()

    def test_lost_race_to_finish(self, client, manager):
        game_session = make_session()
        manager.get_session.return_value = game_session
        manager.process_action.side_effect = InvalidState("Session cannot continue")

        response = client.post(
            f"/sessions/{game_session.session_id}/action", json={"action_type": "Search"}
        )

        assert response.status_code == 400

    def test_unknown_action_type(self, client, manager):
        game_session = make_session()
        manager.get_session.return_value = game_session

        response = client.post(
            f"/sessions/{game_session.session_id}/action", json={"action_type": "Dance"}
        )

        assert response.status_code == 422
        manager.process_action.assert_not_awaited()

    def test_invalid_argument_from_engine(self, client, manager):
        game_session = make_session()
        manager.get_session.return_value = game_session
        manager.process_action.side_effect = InvalidArgument("Invalid action type")

        response = client.post(
            f"/sessions/{game_session.session_id}/action", json={"action_type": "Flee"}
        )

        assert response.status_code == 422

    def test_missing_session(self, client, manager):
        manager.get_session.side_effect = NotFound("Session not found")

        response = client.post(f"/sessions/{uuid4()}/action", json={"action_type": "Flee"})

        assert response.status_code == 404

    def test_rewards_not_configured(self, client, manager):
        manager.get_session.return_value = make_session()
        manager.process_action.side_effect = PreconditionFailed("Game rewards not configured")

        response = client.post(f"/sessions/{uuid4()}/action", json={"action_type": "Flee"})

        assert response.status_code == 409


class TestAbandon:
    def test_abandoned(self, client, manager):
        manager.abandon_session.return_value = True

        response = client.post(f"/sessions/{uuid4()}/abandon")

        assert response.status_code == 204
        assert response.content == b""

    def test_missing(self, client, manager):
        manager.abandon_session.return_value = False

        assert client.post(f"/sessions/{uuid4()}/abandon").status_code == 404


class TestErrorStatus:
    def test_status_codes(self):
        assert ERROR_STATUS == {
            NotFound: 404,
            PreconditionFailed: 409,
            InvalidArgument: 422,
            InvalidState: 400,
        }

    def test_misconfigured_rewards(self, client, manager):
        manager.create_session.side_effect = PreconditionFailed("Game rewards misconfigured")

        response = client.post("/sessions/start", json={"player_id": str(uuid4())})

        assert response.status_code == 409
        assert response.json()["detail"] == "Game rewards misconfigured"
