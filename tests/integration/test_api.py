"""HTTP-level tests running the FastAPI app against in-memory SQLite."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from levellist.app import app
from levellist.core import get_session
from levellist.services import LevelList, SqlEntityStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def client(engine):
    def override_session():
        with Session(engine) as session:
            yield session

    with Session(engine) as session:
        service = LevelList(SqlEntityStore(session))
        service.users.seed_if_empty("boss", "secret1", "Norway")
        for name in ("mia", "alice", "bob"):
            service.users.register(name, "secret1", "Peru")
        service.users.promote_to_mod("boss", "mia")

    app.dependency_overrides[get_session] = override_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def submit_level(client, name="Tartarus", submitter="alice"):
    response = client.post(
        "/submissions/level",
        json={
            "submitter": submitter,
            "name": name,
            "creators": "Dolphy",
            "level_id": 59075347,
            "youtube": f"https://www.youtube.com/watch?v={name}",
            "raw": "https://raw.example/" + name,
            "tags": ["XL Length"],
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def publish(client, name="Tartarus"):
    sub = submit_level(client, name)
    response = client.post(f"/submissions/{sub['id']}/approve", json={"moderator": "mia"})
    assert response.status_code == 200, response.text
    return response.json()["level"]


class TestSystem:
    """Health and catalog endpoints."""

    def test_health(self, client):
        """Probe answers ok."""
        assert client.get("/health").json() == {"ok": True}

    def test_config(self, client):
        """Catalogs are exposed."""
        body = client.get("/config").json()
        assert "Memory Level" in body["tags"]
        assert body["titles"][0]["id"] == "fresh"
        assert body["audit_limit"] == 300


class TestWorkflow:
    """Submission to leaderboard, end to end."""

    def test_level_then_completion(self, client):
        """Approving a completion awards points and updates the leaderboard."""
        level = publish(client)
        assert level["placement"] == 1
        assert level["thumbnail"] == "https://i.ytimg.com/vi/Tartarus/hqdefault.jpg"

        sub = client.post(
            "/submissions/completion",
            json={
                "submitter": "bob",
                "level_ref": level["id"],
                "youtube": "https://youtu.be/run",
                "raw": "https://raw.example/run",
                "percent": 100,
            },
        ).json()
        assert sub["status"] == "pending"
        assert [s["id"] for s in client.get("/submissions").json()] == [sub["id"]]

        approved = client.post(f"/submissions/{sub['id']}/approve", json={"moderator": "mia"}).json()
        assert approved["pointsAwarded"] == 100
        assert approved["submission"]["status"] == "approved"

        entries = client.get("/leaderboard").json()["entries"]
        assert entries[0]["username"] == "bob"
        assert entries[0]["points"] == 100
        assert entries[0]["rank"] == 1
        assert client.get("/leaderboard/BOB").json()["rank"] == 1

        history = client.get("/submissions", params={"status": "all"}).json()
        assert {s["status"] for s in history} == {"approved"}

    def test_levels_listing(self, client):
        """Levels come back ordered with an embed link."""
        publish(client, "A")
        b = publish(client, "B")
        moved = client.post(f"/levels/{b['id']}/move", json={"moderator": "mia", "direction": "up"}).json()
        assert moved["moved"]
        levels = client.get("/levels").json()
        assert [lv["name"] for lv in levels] == ["B", "A"]
        assert levels[0]["embed"] == "https://www.youtube.com/embed/B"

    def test_remove_level(self, client):
        """Removing renumbers the remainder."""
        a = publish(client, "A")
        publish(client, "B")
        response = client.delete(f"/levels/{a['id']}", params={"moderator": "mia"})
        assert response.status_code == 200
        assert [(lv["name"], lv["placement"]) for lv in client.get("/levels").json()] == [("B", 1)]

    def test_reject(self, client):
        """Rejected submissions keep the reason."""
        sub = submit_level(client)
        body = client.post(
            f"/submissions/{sub['id']}/reject", json={"moderator": "mia", "reason": "no video"}
        ).json()
        assert body["status"] == "rejected"
        assert body["resolution"] == "no video"

    def test_double_approve_conflicts(self, client):
        """A resolved submission answers 409."""
        sub = submit_level(client)
        client.post(f"/submissions/{sub['id']}/approve", json={"moderator": "mia"})
        response = client.post(f"/submissions/{sub['id']}/approve", json={"moderator": "mia"})
        assert response.status_code == 409
        assert response.json()["error"] == "invalid_transition"


class TestErrors:
    """Domain errors map to status codes."""

    def test_player_cannot_approve(self, client):
        """403 for non-staff."""
        sub = submit_level(client)
        response = client.post(f"/submissions/{sub['id']}/approve", json={"moderator": "bob"})
        assert response.status_code == 403
        assert response.json() == {"detail": "Moderators only", "error": "forbidden"}

    def test_unknown_user(self, client):
        """404 for missing profiles."""
        assert client.get("/users/ghost").status_code == 404

    def test_validation(self, client):
        """400 for bad registration input."""
        response = client.post("/users", json={"username": "x y", "password": "secret1", "nationality": "Peru"})
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    def test_missing_actor(self, client):
        """Missing body fields are rejected before reaching the service."""
        assert client.post("/bans", json={"username": "bob"}).status_code == 400


class TestUsers:
    """Profiles, titles and roles over HTTP."""

    def test_register_and_profile(self, client):
        """Public views never leak the password."""
        created = client.post(
            "/users", json={"username": "zed", "password": "secret1", "nationality": "Chile"}
        )
        assert created.status_code == 201
        assert "password" not in created.json()

        client.patch("/users/zed/profile", json={"bio": "hi", "show_country": False})
        profile = client.get("/users/zed").json()
        assert profile["user"]["bio"] == "hi"
        assert profile["user"]["nationality"] is None
        assert profile["user"]["title"]["id"] == "fresh"

    def test_equip_title(self, client):
        """Eligible titles equip, ineligible ones answer 403."""
        publish(client)
        level_id = client.get("/levels").json()[0]["id"]
        sub = client.post(
            "/submissions/completion",
            json={"submitter": "bob", "level_ref": level_id, "youtube": "https://youtu.be/r", "raw": "r"},
        ).json()
        client.post(f"/submissions/{sub['id']}/approve", json={"moderator": "mia"})

        ok = client.post("/users/bob/title", json={"title_id": "top1"})
        assert ok.json()["equippedTitle"] == "top1"
        denied = client.post("/users/bob/title", json={"title_id": "god_like"})
        assert denied.status_code == 403
        assert denied.json()["error"] == "ineligible_title"

    def test_promote(self, client):
        """Only the head admin promotes."""
        assert client.post("/users/bob/promote", json={"actor": "mia"}).status_code == 403
        assert client.post("/users/bob/promote", json={"actor": "boss"}).json()["role"] == "mod"

    def test_delete_completion(self, client):
        """Deleting a completion subtracts its snapshotted points."""
        level = publish(client)
        sub = client.post(
            "/submissions/completion",
            json={"submitter": "alice", "level_ref": level["id"], "youtube": "https://youtu.be/a", "raw": "r"},
        ).json()
        completion = client.post(
            f"/submissions/{sub['id']}/approve", json={"moderator": "mia"}
        ).json()["completion"]

        response = client.delete(
            "/users/alice/completions",
            params={
                "moderator": "mia",
                "level_id": completion["levelId"],
                "youtube": completion["youtube"],
                "ts": completion["ts"],
            },
        )
        assert response.json() == {"ok": True, "pointsRemoved": 100, "points": 0}


class TestBansAndAudit:
    """Ban endpoints and the audit trail."""

    def test_ban_cycle(self, client):
        """Ban, list, check and unban."""
        created = client.post("/bans", json={"moderator": "mia", "username": "bob", "days": 0, "reason": "spam"})
        assert created.status_code == 201
        assert created.json()["permanent"]
        assert [b["username"] for b in client.get("/bans").json()] == ["bob"]
        assert client.get("/bans/bob").json()["banned"]

        blocked = client.post(
            "/submissions/level",
            json={"submitter": "bob", "name": "N", "creators": "c", "level_id": "1",
                  "youtube": "https://youtu.be/n", "raw": "r", "tags": ["Slow Paced"]},
        )
        assert blocked.status_code == 403

        client.delete("/bans/bob", params={"moderator": "mia"})
        assert not client.get("/bans/bob").json()["banned"]

    def test_head_admin_protected(self, client):
        """Banning the head admin is forbidden."""
        response = client.post("/bans", json={"moderator": "mia", "username": "boss", "days": 1})
        assert response.status_code == 403

    def test_audit_newest_first(self, client):
        """The audit endpoint lists the latest action first."""
        publish(client)
        events = client.get("/audit", params={"limit": 2}).json()
        assert len(events) == 2
        assert events[0]["action"] == "approve_level"
        assert events[0]["actor"] == "mia"


class TestAccountTools:
    """Password change and moderator search over HTTP."""

    def test_change_password(self, client):
        """Wrong current password is 403, a valid change succeeds."""
        denied = client.post("/users/alice/password", json={"current": "x", "new": "newsecret", "confirm": "newsecret"})
        assert denied.status_code == 403
        mismatch = client.post(
            "/users/alice/password", json={"current": "secret1", "new": "newsecret", "confirm": "other1"}
        )
        assert mismatch.status_code == 400
        ok = client.post("/users/alice/password", json={"current": "secret1", "new": "newsecret", "confirm": "newsecret"})
        assert ok.json() == {"ok": True, "username": "alice"}
        assert client.get("/audit", params={"limit": 1}).json()[0]["action"] == "change_password"

    def test_search(self, client):
        """Moderators get username, points and role for partial matches."""
        body = client.get("/users", params={"moderator": "mia", "q": "B"}).json()
        assert body == [
            {"username": "boss", "points": 0, "role": "headadmin"},
            {"username": "bob", "points": 0, "role": "user"},
        ]
        assert client.get("/users", params={"moderator": "bob", "q": "a"}).status_code == 403


class TestIntegerFields:
    """Numeric body fields must be whole numbers."""

    @pytest.mark.parametrize("days", [1.9, True, "2.5", "two"])
    def test_ban_days_rejected(self, client, days):
        """Floats, booleans and non-numeric strings are 400."""
        response = client.post("/bans", json={"moderator": "mia", "username": "bob", "days": days})
        assert response.status_code == 400
        assert not client.get("/bans/bob").json()["banned"]

    def test_ban_days_digit_string(self, client):
        """A string of digits is accepted."""
        response = client.post("/bans", json={"moderator": "mia", "username": "bob", "days": "2"})
        assert response.status_code == 201
        assert not response.json()["permanent"]
