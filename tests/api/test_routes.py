"""Integration tests for the HTTP layer: src/api/routes.py wired up by src/main.py"""

from pathlib import Path
from typing import Iterator
from unittest.mock import patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from src import main as main_module
from src.core.config import Settings
from src.core.models import GameModel
from src.db.sql_repository import SQLGameRepository
from src.main import create_app

STARTING_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


@pytest.fixture
def repository(db_session_factory: sessionmaker[Session]) -> SQLGameRepository:
    return SQLGameRepository(db_session_factory)


@pytest.fixture
def client(repository: SQLGameRepository, tmp_path: Path) -> Iterator[TestClient]:
    # point the static files somewhere that does not exist: API only
    settings = Settings(search_depth=1, static_dir=str(tmp_path / "no_static_here"))
    app = create_app(settings, repository=repository)
    with TestClient(app) as test_client:
        yield test_client


def new_game_id(client: TestClient) -> str:
    response = client.post("/api/games")
    assert response.status_code == 201
    return response.json()["game_id"]


def test_health(client: TestClient) -> None:
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_game(client: TestClient) -> None:
    response = client.post("/api/games")
    assert response.status_code == 201
    body = response.json()
    assert body["board"] == STARTING_PLACEMENT
    assert body["current_turn"] == "white"
    assert body["status"] == "in progress"
    assert body["move_history"] == []


def test_get_game(client: TestClient) -> None:
    game_id = new_game_id(client)
    response = client.get(f"/api/games/{game_id}")
    assert response.status_code == 200
    assert response.json()["game_id"] == game_id


def test_get_unknown_game(client: TestClient) -> None:
    response = client.get(f"/api/games/{uuid4()}")
    assert response.status_code == 404
    assert response.json()["error"] == "Game not found"
    assert "details" in response.json()


def test_game_id_must_be_a_uuid(client: TestClient) -> None:
    response = client.get("/api/games/not-a-uuid")
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"


def test_make_move(client: TestClient) -> None:
    game_id = new_game_id(client)
    response = client.post(f"/api/games/{game_id}/moves", json={"from_square": "e2", "to_square": "e4"})
    assert response.status_code == 200
    body = response.json()
    assert body["current_turn"] == "black"
    assert body["move_history"] == ["e2-e4"]
    assert body["board"] == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR"


@pytest.mark.parametrize(
    "move, error",
    [
        ({"from_square": "e7", "to_square": "e5"}, "Invalid move"),  # not your turn
        ({"from_square": "e4", "to_square": "e5"}, "Invalid move"),  # empty square
        ({"from_square": "i2", "to_square": "e4"}, "Invalid position"),  # well-shaped, but not on the board
        ({"from_square": "e22", "to_square": "e4"}, "Invalid request"),  # malformed
        ({"from_square": "e2"}, "Invalid request"),  # missing field
    ],
)
def test_rejected_moves(client: TestClient, move: dict[str, str], error: str) -> None:
    game_id = new_game_id(client)
    response = client.post(f"/api/games/{game_id}/moves", json=move)
    assert response.status_code == 400
    assert response.json()["error"] == error

    # nothing changed
    assert client.get(f"/api/games/{game_id}").json()["move_history"] == []


def test_move_on_unknown_game(client: TestClient) -> None:
    response = client.post(f"/api/games/{uuid4()}/moves", json={"from_square": "e2", "to_square": "e4"})
    assert response.status_code == 404


def test_best_move(client: TestClient) -> None:
    game_id = new_game_id(client)
    response = client.get(f"/api/games/{game_id}/best-move")
    assert response.status_code == 200
    body = response.json()
    assert body["from_square"] == "b1"
    assert body["to_square"] == "c3"
    assert body["notation"] == "Nc3"
    assert body["evaluation"] == 15
    assert body["nodes_searched"] == 20
    assert body["depth"] == 1


def test_best_move_on_unknown_game(client: TestClient) -> None:
    response = client.get(f"/api/games/{uuid4()}/best-move")
    assert response.status_code == 404


def test_computer_move(client: TestClient) -> None:
    game_id = new_game_id(client)
    client.post(f"/api/games/{game_id}/moves", json={"from_square": "e2", "to_square": "e4"})
    response = client.post(f"/api/games/{game_id}/computer-move")
    assert response.status_code == 200
    body = response.json()
    assert body["current_turn"] == "white"
    assert len(body["move_history"]) == 2


def test_no_best_move_once_game_is_over(client: TestClient, repository: SQLGameRepository) -> None:
    _, game_id = repository.create_game(GameModel(STARTING_PLACEMENT, "black", "checkmate", ["x"]))

    response = client.get(f"/api/games/{game_id}/best-move")
    assert response.status_code == 400
    assert response.json()["error"] == "Game over"

    response = client.post(f"/api/games/{game_id}/computer-move")
    assert response.status_code == 400


def test_cors_headers(client: TestClient) -> None:
    response = client.get("/api/health", headers={"Origin": "http://example.com"})
    assert response.headers["access-control-allow-origin"] == "*"


def test_static_files_are_served(repository: SQLGameRepository, tmp_path: Path) -> None:
    (tmp_path / "index.html").write_text("<h1>chess</h1>")
    app = create_app(Settings(search_depth=1, static_dir=str(tmp_path)), repository=repository)
    with TestClient(app) as test_client:
        response = test_client.get("/")
        assert response.status_code == 200
        assert "chess" in response.text

        # API routes still take precedence
        assert test_client.get("/api/health").json() == {"status": "ok"}


def test_app_is_only_built_by_the_factory() -> None:
    """Importing the module builds nothing: uvicorn gets the factory and calls it itself"""
    assert not hasattr(main_module, "app")

    with patch("src.main.uvicorn.run") as mock_run:
        main_module.run()
    mock_run.assert_called_once()
    args, kwargs = mock_run.call_args
    assert args == ("src.main:create_app",)
    assert kwargs["factory"] is True
