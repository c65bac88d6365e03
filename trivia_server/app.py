"""HTTP entrypoint for score submission and ranked leaderboards.

This server does NOT serve the game client or the question bank.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any

from aiohttp import web

from trivia_server.game import protocol
from trivia_server.game.config import ServerConfig
from trivia_server.storage.memory import MemoryStore, ScoreEntry

logger = logging.getLogger(__name__)

INVALID_DATA = {"success": False, "error": "Invalid data"}


class LeaderboardService:
    def __init__(self, config: ServerConfig):
        self.config = config
        self.server_id = str(uuid.uuid4())
        self.start_time = time.time()

        self.memory = MemoryStore(config.tiers, limit=config.leaderboard_size)

    async def start(self) -> None:
        self.start_time = time.time()
        logger.info("leaderboard service %s started, tiers=%s", self.server_id, list(self.memory.tiers))

    async def stop(self) -> None:
        logger.info("leaderboard service %s stopping, %d entries discarded", self.server_id, self.memory.entry_count())

    def submit(self, data: Any) -> bool:
        """Validate a raw submission body and rank it. No mutation on failure."""
        if not isinstance(data, dict):
            logger.info("rejected submission: body must be object")
            return False
        try:
            sub = protocol.Submission.parse(data, self.memory.tiers)
        except protocol.ProtocolError as e:
            logger.info("rejected submission: %s", e)
            return False

        entry = ScoreEntry(name=sub.name, score=sub.score, time=sub.time, questionCount=sub.questionCount)
        kept = self.memory.submit(entry)
        logger.info(
            "score accepted: tier=%d name=%r score=%s time=%s kept=%s",
            entry.questionCount,
            entry.name,
            entry.score,
            entry.time,
            kept,
        )
        return True

    def leaderboard(self, question_count: Any = None) -> list[dict[str, Any]] | dict[str, list[dict[str, Any]]]:
        # An absent or unknown tier falls back to every tier.
        tier = protocol.parse_tier(question_count, self.memory.tiers)
        if tier is not None:
            return [e.to_dict() for e in self.memory.get_leaderboard(tier)]
        return {str(t): [e.to_dict() for e in board] for t, board in self.memory.get_all().items()}

    def version_payload(self) -> dict[str, Any]:
        return {
            "serverId": self.server_id,
            "serverVersion": self.config.server_version,
            "tiers": list(self.memory.tiers),
            "leaderboardSize": self.memory.limit,
        }


def _cors_headers(config: ServerConfig, origin: str | None) -> dict[str, str]:
    if not origin:
        return {}
    if config.cors_allow_all:
        return {"Access-Control-Allow-Origin": origin, "Vary": "Origin"}
    if origin in config.cors_allowed_origins:
        return {"Access-Control-Allow-Origin": origin, "Vary": "Origin"}
    return {}


@web.middleware
async def cors_middleware(request: web.Request, handler):
    if request.method == "OPTIONS":
        origin = request.headers.get("Origin")
        headers = {
            **_cors_headers(request.app["config"], origin),
            "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
            "Access-Control-Max-Age": "86400",
        }
        return web.Response(status=204, headers=headers)

    cors = _cors_headers(request.app["config"], request.headers.get("Origin"))
    try:
        resp = await handler(request)
    except web.HTTPException as e:
        # 404/405 carry CORS too so browsers can read the status.
        e.headers.update(cors)
        raise

    resp.headers.update(cors)
    return resp


def create_app(config: ServerConfig) -> web.Application:
    app = web.Application(middlewares=[cors_middleware])
    svc = LeaderboardService(config)

    app["config"] = config
    app["svc"] = svc

    async def on_startup(_: web.Application):
        await svc.start()

    async def on_cleanup(_: web.Application):
        await svc.stop()

    app.on_startup.append(on_startup)
    app.on_cleanup.append(on_cleanup)

    async def health(_: web.Request):
        return web.json_response(
            {
                "ok": True,
                "uptimeSec": time.time() - svc.start_time,
                "entries": svc.memory.entry_count(),
                **svc.version_payload(),
            }
        )

    async def root(_: web.Request):
        return web.json_response(
            {
                "ok": True,
                "service": "trivia-leaderboard",
                **svc.version_payload(),
                "endpoints": {
                    "health": "/health",
                    "version": "/version",
                    "submit": "/submit",
                    "leaderboard": "/leaderboard",
                },
            }
        )

    async def version(_: web.Request):
        return web.json_response(svc.version_payload())

    async def submit(request: web.Request):
        try:
            body = protocol.loads(await request.read())
        except protocol.ProtocolError as e:
            logger.info("rejected submission: %s", e)
            return web.json_response(INVALID_DATA, status=400)
        if not svc.submit(body):
            return web.json_response(INVALID_DATA, status=400)
        return web.json_response({"success": True})

    async def leaderboard(request: web.Request):
        return web.json_response(svc.leaderboard(request.query.get("questionCount")))

    app.router.add_get("/", root)
    app.router.add_get("/health", health)
    app.router.add_get("/version", version)
    app.router.add_post("/submit", submit)
    app.router.add_get("/leaderboard", leaderboard)

    return app


def main() -> None:
    config = ServerConfig.from_env()
    logging.basicConfig(level=config.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = create_app(config)
    logger.info("leaderboard server running on http://%s:%d", config.host, config.port)
    web.run_app(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
