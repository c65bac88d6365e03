from __future__ import annotations

from trivia_server.app import create_app
from trivia_server.game.config import ServerConfig

INVALID = {"success": False, "error": "Invalid data"}


async def _submit(client, **body):
    return await client.post("/submit", json=body)


async def test_submit_and_rank_by_time(client):
    resp = await _submit(client, name="Ann", score=90, time=120, questionCount=10)
    assert resp.status == 200
    assert await resp.json() == {"success": True}
    await _submit(client, name="Bo", score=90, time=100, questionCount=10)

    resp = await client.get("/leaderboard", params={"questionCount": "10"})
    assert resp.status == 200
    board = await resp.json()
    assert [e["name"] for e in board] == ["Bo", "Ann"]
    assert set(board[0]) == {"name", "score", "time", "date", "questionCount"}
    assert board[0]["questionCount"] == 10
    assert board[0]["date"].endswith("Z")


async def test_tier_keeps_ten_best(client):
    for i, score in enumerate(range(100, 45, -5)):
        resp = await _submit(client, name=f"p{i}", score=score, time=60, questionCount=20)
        assert resp.status == 200

    board = await (await client.get("/leaderboard?questionCount=20")).json()
    assert [e["score"] for e in board] == list(range(100, 50, -5))


async def test_non_numeric_score_rejected(client):
    await _submit(client, name="keep", score=3, time=5, questionCount=10)
    before = await (await client.get("/leaderboard?questionCount=10")).json()

    resp = await _submit(client, name="X", score="oops", time=5, questionCount=10)
    assert resp.status == 400
    assert await resp.json() == INVALID

    after = await (await client.get("/leaderboard?questionCount=10")).json()
    assert after == before


async def test_unknown_tier_rejected(client):
    resp = await _submit(client, name="X", score=1, time=5, questionCount=15)
    assert resp.status == 400
    assert await resp.json() == INVALID

    everything = await (await client.get("/leaderboard")).json()
    assert set(everything) == {"10", "20", "50", "100"}
    assert all(board == [] for board in everything.values())


async def test_string_tier_is_coerced(client):
    resp = await _submit(client, name="S", score=4, time=4, questionCount="50")
    assert resp.status == 200
    board = await (await client.get("/leaderboard?questionCount=50")).json()
    assert board[0]["questionCount"] == 50


async def test_rejects_bad_types_and_bodies(client):
    bad = [
        {"name": 7, "score": 1, "time": 1, "questionCount": 10},
        {"name": "a", "score": 1, "time": "1", "questionCount": 10},
        {"name": "a", "score": True, "time": 1, "questionCount": 10},
        {"name": "a", "score": 1, "time": 1},
    ]
    for body in bad:
        resp = await client.post("/submit", json=body)
        assert resp.status == 400
        assert await resp.json() == INVALID

    for raw in (b"not json", b"[1, 2, 3]", b"", b'{"name": "a", "score": NaN, "time": 1, "questionCount": 10}'):
        resp = await client.post("/submit", data=raw, headers={"Content-Type": "application/json"})
        assert resp.status == 400
        assert await resp.json() == INVALID

    everything = await (await client.get("/leaderboard")).json()
    assert all(board == [] for board in everything.values())


async def test_empty_leaderboard_fallbacks(client):
    expected = {"10": [], "20": [], "50": [], "100": []}
    assert await (await client.get("/leaderboard")).json() == expected
    resp = await client.get("/leaderboard?questionCount=999")
    assert resp.status == 200
    assert await resp.json() == expected
    assert await (await client.get("/leaderboard?questionCount=abc")).json() == expected


async def test_full_mapping_carries_entries(client):
    await _submit(client, name="A", score=1, time=1, questionCount=100)
    everything = await (await client.get("/leaderboard")).json()
    assert [e["name"] for e in everything["100"]] == ["A"]
    assert everything["10"] == []


async def test_reads_are_idempotent(client):
    await _submit(client, name="A", score=2, time=3, questionCount=10)
    first = await (await client.get("/leaderboard?questionCount=10")).json()
    second = await (await client.get("/leaderboard?questionCount=10")).json()
    assert first == second


async def test_cors_headers(client):
    resp = await client.get("/leaderboard", headers={"Origin": "http://example.test"})
    assert resp.headers["Access-Control-Allow-Origin"] == "http://example.test"

    resp = await client.options(
        "/submit",
        headers={"Origin": "http://example.test", "Access-Control-Request-Method": "POST"},
    )
    assert resp.status == 204
    assert resp.headers["Access-Control-Allow-Origin"] == "http://example.test"
    assert "POST" in resp.headers["Access-Control-Allow-Methods"]


async def test_cors_restricted_origins(aiohttp_client):
    cfg = ServerConfig(cors_allow_all=False, cors_allowed_origins=["http://ok.test"])
    client = await aiohttp_client(create_app(cfg))

    resp = await client.get("/leaderboard", headers={"Origin": "http://ok.test"})
    assert resp.headers["Access-Control-Allow-Origin"] == "http://ok.test"
    resp = await client.get("/leaderboard", headers={"Origin": "http://evil.test"})
    assert "Access-Control-Allow-Origin" not in resp.headers


async def test_health_and_version(client):
    await _submit(client, name="A", score=1, time=1, questionCount=10)

    health = await (await client.get("/health")).json()
    assert health["ok"] is True
    assert health["entries"] == 1
    assert health["tiers"] == [10, 20, 50, 100]
    assert health["leaderboardSize"] == 10

    version = await (await client.get("/version")).json()
    assert version["serverVersion"] == "1.0.0"
    assert version["serverId"] == health["serverId"]

    root = await (await client.get("/")).json()
    assert root["endpoints"]["submit"] == "/submit"


async def test_unknown_route_is_404(client):
    resp = await client.get("/scores")
    assert resp.status == 404


async def test_wrong_method_is_405(client):
    resp = await client.post("/leaderboard", json={})
    assert resp.status == 405


HUGE = int("1" + "0" * 400)


async def test_huge_integer_score_rejected(client):
    resp = await _submit(client, name="big", score=HUGE, time=1, questionCount=10)
    assert resp.status == 400
    assert await resp.json() == INVALID
    assert await (await client.get("/leaderboard?questionCount=10")).json() == []


async def test_huge_integer_tier_rejected(client):
    resp = await _submit(client, name="big", score=1, time=1, questionCount=HUGE)
    assert resp.status == 400
    assert await resp.json() == INVALID


async def test_huge_hex_tier_read_falls_back(client):
    resp = await client.get("/leaderboard", params={"questionCount": "0x" + "f" * 300})
    assert resp.status == 200
    assert set(await resp.json()) == {"10", "20", "50", "100"}


async def test_non_ascii_digits_read_falls_back(client):
    await _submit(client, name="A", score=1, time=1, questionCount=10)
    resp = await client.get("/leaderboard", params={"questionCount": "١٠"})
    assert resp.status == 200
    assert set(await resp.json()) == {"10", "20", "50", "100"}
