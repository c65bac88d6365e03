from __future__ import annotations

import json

import pytest

from trivia_server.app import create_app
from trivia_server.game.config import ServerConfig
from trivia_server.storage.memory import MemoryStore


@pytest.fixture
def config() -> ServerConfig:
    return ServerConfig()


@pytest.fixture
def store(config: ServerConfig) -> MemoryStore:
    return MemoryStore(config.tiers, limit=config.leaderboard_size)


@pytest.fixture
async def client(aiohttp_client, config: ServerConfig):
    return await aiohttp_client(create_app(config))


@pytest.fixture
def bank_file(tmp_path):
    def write(records) -> str:
        path = tmp_path / "questions.json"
        path.write_text(json.dumps(records), encoding="utf-8")
        return str(path)

    return write
