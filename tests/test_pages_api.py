"""
Tests API pages — CRUD + validation des blocs avant écriture.
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "libs", "block_contracts"))

import pytest
from fastapi.testclient import TestClient


# ── Fixtures ──────────────────────────────────────────────────────────────

@pytest.fixture
def client(tmp_path, monkeypatch):
    """Client de test avec DB SQLite temporaire (page d'accueil seedée)."""
    monkeypatch.setenv("DB_PATH", str(tmp_path / "test.db"))

    from bdui.api.main import app

    with TestClient(app) as c:
        yield c


def _card(title="T", description="D", **kw):
    return {"title": title, "description": description, "imageUrl": "", **kw}


def _create(client, **kw):
    payload = {"title": "About", "slug": "about", "blocks": []}
    payload.update(kw)
    return client.post("/api/pages", json=payload)


# ── Lecture ───────────────────────────────────────────────────────────────

class TestRead:
    def test_seeded_home(self, client):
        r = client.get("/api/pages")
        assert r.status_code == 200
        pages = r.json()
        assert len(pages) == 1
        assert pages[0]["id"] == "home"
        assert [b["type"] for b in pages[0]["blocks"]] == ["banner", "text", "cards"]

    def test_root(self, client):
        r = client.get("/api/pages/root")
        assert r.status_code == 200
        assert r.json()["slug"] == "/"

    def test_by_id(self, client):
        assert client.get("/api/pages/id/home").json()["title"] == "Главная страница"
        assert client.get("/api/pages/id/nope").status_code == 404

    def test_by_slug_normalized(self, client):
        _create(client)
        r = client.get("/api/pages/about")
        assert r.status_code == 200
        assert r.json()["slug"] == "/about"

    def test_unknown_slug_404(self, client):
        assert client.get("/api/pages/missing").status_code == 404

    def test_seeded_blocks_are_valid(self, client):
        from block_contracts import validate_block_data
        for block in client.get("/api/pages/root").json()["blocks"]:
            assert validate_block_data(block["type"], block["data"]).valid


# ── Création ──────────────────────────────────────────────────────────────

class TestCreate:
    def test_create_valid(self, client):
        r = _create(client, blocks=[{"type": "text", "data": {"title": "Hi", "content": "Body"}}])
        assert r.status_code == 200
        page = r.json()
        assert page["slug"] == "/about"
        assert page["blocks"][0]["id"]
        assert page["blocks"][0]["hidden"] is False

    def test_create_assigns_item_ids(self, client):
        r = _create(client, blocks=[{"type": "cards", "data": {"title": "", "cards": [_card(), _card(id="keep")]}}])
        cards = r.json()["blocks"][0]["data"]["cards"]
        assert cards[0]["id"]
        assert cards[1]["id"] == "keep"

    def test_create_with_unhashable_item_ids(self, client):
        r = _create(client, blocks=[{"type": "cards", "data": {"title": "", "cards": [_card(id=[]), _card(id={"a": 1})]}}])
        assert r.status_code == 200
        cards = r.json()["blocks"][0]["data"]["cards"]
        assert isinstance(cards[0]["id"], str) and cards[0]["id"]
        assert cards[1]["id"] == {"a": 1}

    def test_create_keeps_block_id(self, client):
        r = _create(client, blocks=[{"id": "blk-1", "type": "promoBanner"}])
        assert r.json()["blocks"][0]["id"] == "blk-1"

    def test_invalid_block_rejected(self, client):
        r = _create(client, blocks=[
            {"type": "text", "data": {"title": "ok", "content": "ok"}},
            {"id": "bad", "type": "banner", "data": {"title": "Hi", "imageUrl": "not-a-url"}},
        ])
        assert r.status_code == 400
        body = r.json()
        assert body["error"] == "Block validation failed"
        assert body["blockType"] == "banner"
        assert body["blockId"] == "bad"
        assert body["errors"] == ["field URL изображения must be a valid URL"]
        assert len(client.get("/api/pages").json()) == 1

    def test_unknown_type_rejected(self, client):
        r = _create(client, blocks=[{"type": "nope", "data": {}}])
        assert r.status_code == 400
        assert len(r.json()["errors"]) == 1

    def test_hidden_block_still_validated(self, client):
        r = _create(client, blocks=[{"type": "cards", "hidden": True, "data": {"title": "x", "cards": []}}])
        assert r.status_code == 400
        assert r.json()["errors"] == ["field Карточки must contain at least one item"]

    def test_duplicate_id_conflict(self, client):
        assert _create(client, id="home").status_code == 409


# ── Mise à jour / suppression ─────────────────────────────────────────────

class TestUpdateDelete:
    def test_update_title_and_slug(self, client):
        r = client.put("/api/pages/home", json={"title": "Home", "slug": "start"})
        assert r.status_code == 200
        body = r.json()
        assert body["title"] == "Home"
        assert body["slug"] == "/start"
        assert len(body["blocks"]) == 3

    def test_update_blocks(self, client):
        r = client.put("/api/pages/home", json={"blocks": [{"type": "text", "data": {"title": "A", "content": "B"}}]})
        assert r.status_code == 200
        assert [b["type"] for b in r.json()["blocks"]] == ["text"]

    def test_update_invalid_leaves_page(self, client):
        r = client.put("/api/pages/home", json={"blocks": [{"type": "text", "data": {}}]})
        assert r.status_code == 400
        assert r.json()["errors"] == ["field Заголовок is required", "field Содержимое is required"]
        assert len(client.get("/api/pages/id/home").json()["blocks"]) == 3

    def test_update_unknown_404(self, client):
        assert client.put("/api/pages/nope", json={"title": "x"}).status_code == 404

    def test_delete(self, client):
        assert client.delete("/api/pages/home").json() == {"success": True}
        assert client.get("/api/pages/id/home").status_code == 404

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert body["block_types"] == 7
