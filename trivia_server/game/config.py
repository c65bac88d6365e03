"""Ports, tiers, CORS, question bank location."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

DEFAULT_QUESTIONS_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "data", "questions.json"))


@dataclass
class ServerConfig:
    # Versions
    server_version: str = "1.0.0"

    # Network
    host: str = "0.0.0.0"
    port: int = 3000
    cors_allow_all: bool = True
    cors_allowed_origins: list[str] = field(default_factory=list)

    # Leaderboards
    # Tier membership gates both submission and the per-tier read path.
    tiers: tuple[int, ...] = (10, 20, 50, 100)
    leaderboard_size: int = 10

    # Content
    questions_path: str = DEFAULT_QUESTIONS_PATH

    # Logging
    log_level: str = "INFO"

    @staticmethod
    def _parse_bool(v: str | None, default: bool) -> bool:
        if v is None:
            return default
        return v.strip().lower() in ("1", "true", "yes", "on")

    @classmethod
    def from_env(cls) -> "ServerConfig":
        cfg = cls()
        cfg.host = os.environ.get("TRIVIA_HOST", cfg.host)
        if os.environ.get("TRIVIA_PORT"):
            try:
                cfg.port = int(os.environ.get("TRIVIA_PORT"))
            except ValueError:
                pass
        cfg.cors_allow_all = cls._parse_bool(os.environ.get("TRIVIA_CORS_ALLOW_ALL"), cfg.cors_allow_all)
        origins = os.environ.get("TRIVIA_CORS_ORIGINS")
        if origins:
            cfg.cors_allowed_origins = [o.strip() for o in origins.split(",") if o.strip()]
        cfg.questions_path = os.environ.get("TRIVIA_QUESTIONS_PATH", cfg.questions_path)
        level = os.environ.get("TRIVIA_LOG_LEVEL")
        if level and isinstance(logging.getLevelName(level.strip().upper()), int):
            cfg.log_level = level.strip().upper()
        return cfg
