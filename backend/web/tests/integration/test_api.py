"""End-to-end tests of the HTTP API over the demo dataset and a SQLite database."""

import hashlib

import pytest

from web.tests.helpers.client import ADMIN_KEY, make_client

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _seed(client):
    conn = client.app.state.db.connection
    conn.execute(
        "INSERT INTO episodes (id, season, episode_number, title, quote_text, quote_speaker, store_next_door) "
        "VALUES ('ep-1', 1, 1, 'Human Flesh', 'We''re not cannibals!', 'Bob', 'Amazing Bargains')",
    )
    conn.execute("INSERT INTO episodes (id, season, episode_number, title) VALUES ('ep-2', 2, 8, 'Bad Tina')")
    conn.execute(
        "INSERT INTO burgers (id, episode_id, name, description) "
        "VALUES ('burger-1', 'ep-1', 'New Bacon-ings', '(comes with bacon)')",
    )
    conn.execute("INSERT INTO burgers (id, episode_id, name) VALUES ('burger-2', 'ep-2', 'Bad to the Bone-In Burger')")
    conn.commit()


class TestHealth:
    def test_health(self, demo_client):
        body = demo_client.get("/health").json()
        assert body["status"] == "ok"
        assert "version" in body
        assert "commit" in body


class TestDailyPuzzle:
    def test_demo_mode_always_has_a_puzzle(self, demo_client):
        response = demo_client.get("/api/daily")
        assert response.status_code == 200
        body = response.json()
        assert body["puzzle_id"] == "2026-01-20"
        assert body["demo_mode"] is True
        assert len(body["answer_hash"]) == 64
        assert body["burger"]["name"]

    def test_no_puzzle_scheduled(self, db_client):
        response = db_client.get("/api/daily")
        assert response.status_code == 404
        assert response.json() == {"error": "No puzzle available for today"}

    def test_scheduled_puzzle_hides_episode_id(self, db_client, admin_headers):
        _seed(db_client)
        db_client.post("/api/admin/puzzles", json={"date": "2026-01-20", "burger_id": "burger-1"}, headers=admin_headers)

        response = db_client.get("/api/daily")
        assert response.status_code == 200
        body = response.json()
        assert body["demo_mode"] is False
        assert body["answer_hash"] == hashlib.sha256(b"ep-1").hexdigest()
        assert body["burger"] == {"name": "New Bacon-ings", "description": "(comes with bacon)"}
        assert body["quote"] == {"text": "We're not cannibals!", "speaker": "Bob"}
        assert body["hints"]["store_next_door"] == "Amazing Bargains"
        assert body["episode"] == {"season": 1, "episode_number": 1, "title": "Human Flesh"}
        assert "ep-1" not in response.text


class TestEpisodeSearch:
    def test_season_and_episode(self, demo_client):
        episodes = demo_client.get("/api/episodes", params={"q": "S1E1"}).json()["episodes"]
        assert [ep["title"] for ep in episodes] == ["Human Flesh"]
        assert episodes[0]["hash"] == hashlib.sha256(episodes[0]["id"].encode()).hexdigest()

    def test_title_substring(self, db_client):
        _seed(db_client)
        episodes = db_client.get("/api/episodes", params={"q": "tina"}).json()["episodes"]
        assert episodes == [
            {
                "id": "ep-2",
                "season": 2,
                "episode_number": 8,
                "title": "Bad Tina",
                "synopsis": None,
                "hash": hashlib.sha256(b"ep-2").hexdigest(),
            },
        ]

    def test_blank_query_lists_episodes(self, demo_client):
        assert len(demo_client.get("/api/episodes").json()["episodes"]) == 8


class TestGlobalStats:
    def test_requires_date(self, demo_client):
        response = demo_client.get("/api/stats")
        assert response.status_code == 400
        assert response.json() == {"error": "Date parameter is required"}

    def test_rejects_bad_date(self, demo_client):
        assert demo_client.get("/api/stats", params={"date": "yesterday"}).status_code == 400

    def test_submit_and_read(self, db_client):
        for guess_number in (1, 3, 3, 0):
            response = db_client.post("/api/stats", json={"date": "2026-01-20", "guess_number": guess_number})
            assert response.json() == {"success": True}

        body = db_client.get("/api/stats", params={"date": "2026-01-20"}).json()
        assert body["win_on_guess_1"] == 1
        assert body["win_on_guess_3"] == 2
        assert body["losses"] == 1
        assert body["total_plays"] == 4

    @pytest.mark.parametrize(
        ("payload", "message"),
        [
            ({"date": "2026-01-20"}, "Date and guess_number are required"),
            ({"guess_number": 1}, "Date and guess_number are required"),
            ({"date": "2026-01-20", "guess_number": 7}, "guess_number must be between 0 and 6"),
            ({"date": "2026-01-20", "guess_number": -1}, "guess_number must be between 0 and 6"),
            ({"date": "2026-01-20", "guess_number": "3"}, "guess_number must be between 0 and 6"),
            ({"date": "2026-01-20", "guess_number": True}, "guess_number must be between 0 and 6"),
        ],
    )
    def test_submit_validation(self, demo_client, payload, message):
        response = demo_client.post("/api/stats", json=payload)
        assert response.status_code == 400
        assert response.json() == {"error": message}

    def test_submit_invalid_json(self, demo_client):
        response = demo_client.post("/api/stats", content=b"{not json", headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON body"}


class TestAdminAuth:
    def test_disabled_without_key(self, tmp_path):
        client = make_client(tmp_path, admin_api_key=None)
        response = client.get("/api/admin/episodes", headers={"X-Admin-Key": ADMIN_KEY})
        assert response.status_code == 503
        assert response.json() == {"error": "Admin API is not configured"}

    @pytest.mark.parametrize("headers", [{}, {"X-Admin-Key": "wrong-key-wrong-key"}])
    def test_missing_or_wrong_key(self, demo_client, headers):
        response = demo_client.get("/api/admin/episodes", headers=headers)
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_player_routes_need_no_key(self, demo_client):
        assert demo_client.get("/api/daily").status_code == 200


class TestAdminEpisodes:
    def test_list_with_burgers(self, demo_client, admin_headers):
        body = demo_client.get("/api/admin/episodes", params={"season": "1"}, headers=admin_headers).json()
        assert [ep["id"] for ep in body["episodes"]] == ["demo-004"]
        assert len(body["burgers"]) == 8

    def test_season_must_be_numeric(self, demo_client, admin_headers):
        response = demo_client.get("/api/admin/episodes", params={"season": "one"}, headers=admin_headers)
        assert response.status_code == 400

    def test_update_hints_and_burgers(self, db_client, admin_headers):
        _seed(db_client)
        response = db_client.put(
            "/api/admin/episodes",
            json={
                "episode_id": "ep-2",
                "episode": {"quote_text": "Uhhhh", "quote_speaker": "Tina", "pest_control_truck": ""},
                "burgers": [
                    {"id": "burger-2", "name": "Bad to the Bone-In Burger", "description": "(comes with a bone)"},
                    {"name": "Tina-rannosaurus Wrecks Burger"},
                ],
            },
            headers=admin_headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [b["name"] for b in body["burgers"]] == ["Bad to the Bone-In Burger", "Tina-rannosaurus Wrecks Burger"]

        listed = db_client.get("/api/admin/episodes", params={"search": "Tina"}, headers=admin_headers).json()
        assert listed["episodes"][0]["quote_speaker"] == "Tina"
        assert listed["episodes"][0]["pest_control_truck"] is None

    def test_update_requires_episode_id(self, demo_client, admin_headers):
        response = demo_client.put("/api/admin/episodes", json={"episode": {}}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Episode ID required"}

    def test_update_unknown_episode(self, demo_client, admin_headers):
        response = demo_client.put("/api/admin/episodes", json={"episode_id": "missing"}, headers=admin_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Episode not found"}

    def test_update_rejects_blank_burger_name(self, demo_client, admin_headers):
        response = demo_client.put(
            "/api/admin/episodes",
            json={"episode_id": "demo-001", "burgers": [{"name": ""}]},
            headers=admin_headers,
        )
        assert response.status_code == 400


class TestAdminPuzzles:
    def test_schedule_list_delete(self, db_client, admin_headers):
        _seed(db_client)
        for day, burger in (("2026-01-21", "burger-1"), ("2026-01-22", "burger-2"), ("2026-02-01", "burger-1")):
            response = db_client.post("/api/admin/puzzles", json={"date": day, "burger_id": burger}, headers=admin_headers)
            assert response.json() == {"success": True}

        puzzles = db_client.get(
            "/api/admin/puzzles",
            params={"start": "2026-01-21", "end": "2026-01-31"},
            headers=admin_headers,
        ).json()["puzzles"]
        assert [(p["date"], p["burger_name"]) for p in puzzles] == [
            ("2026-01-21", "New Bacon-ings"),
            ("2026-01-22", "Bad to the Bone-In Burger"),
        ]

        response = db_client.request("DELETE", "/api/admin/puzzles", json={"date": "2026-01-21"}, headers=admin_headers)
        assert response.json() == {"success": True, "deleted": True}
        response = db_client.request("DELETE", "/api/admin/puzzles", json={"date": "2026-01-21"}, headers=admin_headers)
        assert response.json() == {"success": True, "deleted": False}

    def test_list_requires_range(self, demo_client, admin_headers):
        response = demo_client.get("/api/admin/puzzles", params={"start": "2026-01-01"}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Start and end dates required"}

    def test_schedule_requires_fields(self, demo_client, admin_headers):
        response = demo_client.post("/api/admin/puzzles", json={"date": "2026-01-21"}, headers=admin_headers)
        assert response.json() == {"error": "Date and burger_id required"}

    def test_schedule_unknown_burger(self, db_client, admin_headers):
        response = db_client.post(
            "/api/admin/puzzles",
            json={"date": "2026-01-21", "burger_id": "missing"},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_delete_requires_date(self, demo_client, admin_headers):
        response = demo_client.request("DELETE", "/api/admin/puzzles", json={}, headers=admin_headers)
        assert response.json() == {"error": "Date required"}


class TestAdminUpload:
    def test_upload_is_served_from_stills(self, demo_client, admin_headers):
        response = demo_client.post(
            "/api/admin/upload",
            files={"file": ("still.png", PNG_BYTES, "image/png")},
            headers=admin_headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["url"].startswith("/stills/")
        assert body["url"].endswith(".png")
        assert body["path"] == "stills/" + body["url"].removeprefix("/stills/")

        served = demo_client.get(body["url"])
        assert served.status_code == 200
        assert served.content == PNG_BYTES

    def test_rejects_file_type(self, demo_client, admin_headers):
        response = demo_client.post(
            "/api/admin/upload",
            files={"file": ("x.svg", b"<svg/>", "image/svg+xml")},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid file type. Allowed: JPEG, PNG, WebP, GIF"}

    def test_rejects_large_file(self, tmp_path, admin_headers):
        client = make_client(tmp_path, max_upload_bytes=16)
        response = client.post(
            "/api/admin/upload",
            files={"file": ("still.png", PNG_BYTES, "image/png")},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"].startswith("File too large")

    def test_requires_file(self, demo_client, admin_headers):
        response = demo_client.post("/api/admin/upload", data={"other": "x"}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "No file provided"}

    def test_requires_admin_key(self, demo_client):
        response = demo_client.post("/api/admin/upload", files={"file": ("still.png", PNG_BYTES, "image/png")})
        assert response.status_code == 401
