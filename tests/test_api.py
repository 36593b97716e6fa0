"""Tests for the HTTP layer: docgate/main.py and docgate/routes/*"""

from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from docgate.main import create_app
from docgate.prompts import REFUSAL_ANSWER
from docgate.rag import RAGEngine

from tests.conftest import make_record


class TestHealth:
    def test_reports_items_and_thresholds(self, client, engine):
        engine.store.append([make_record(0)])

        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["items"] == 1
        assert data["minTopSim"] == 0.78
        assert data["minAvgTop3"] == 0.72


class TestChat:
    def test_missing_message_is_400(self, client):
        response = client.post("/api/chat", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "message is required"}

    def test_non_string_message_is_400(self, client):
        response = client.post("/api/chat", json={"message": ["not", "a", "string"]})
        assert response.status_code == 400
        assert "error" in response.json()

    def test_empty_index_is_400(self, client):
        response = client.post("/api/chat", json={"message": "hello"})
        assert response.status_code == 400
        assert response.json()["error"].startswith("No index found")

    def test_answer_with_sources(self, client, engine):
        engine.store.append([make_record(0, embedding=[1.0, 0.0, 0.0])])
        engine.embedder.vectors["hello"] = [1.0, 0.0, 0.0]

        response = client.post("/api/chat", json={"message": "hello"})

        assert response.status_code == 200
        assert response.json() == {
            "answer": "Grounded answer [[1]]",
            "sources": [{"id": 1, "source": "doc.txt", "score": 1.0}],
        }

    def test_refusal(self, client, engine):
        engine.store.append([make_record(0, embedding=[1.0, 0.0, 0.0])])

        response = client.post("/api/chat", json={"message": "off topic"})

        assert response.status_code == 200
        assert response.json() == {"answer": REFUSAL_ANSWER, "sources": []}

    def test_query_dimension_mismatch_is_500(self, client, engine):
        engine.store.append([make_record(0, embedding=[1.0, 0.0, 0.0])])
        engine.embedder.vectors["hello"] = [1.0, 0.0]

        response = client.post("/api/chat", json={"message": "hello"})

        assert response.status_code == 500
        assert "2 dimensions but the index has 3" in response.json()["error"]

    def test_external_failure_is_500_with_message(self, client, engine):
        engine.store.append([make_record(0)])

        def boom(text):
            raise RuntimeError("embedding quota exceeded")

        engine.embedder.embed_one = boom
        response = client.post("/api/chat", json={"message": "hello"})

        assert response.status_code == 500
        assert response.json() == {"error": "embedding quota exceeded"}


class TestAdminAuth:
    def test_missing_token_is_401(self, client):
        response = client.get("/api/admin/items")
        assert response.status_code == 401
        assert response.json() == {"error": "unauthorized"}

    def test_wrong_token_is_401(self, client):
        response = client.get("/api/admin/items", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_server_without_token_is_500(self, settings, embedder, generator, fetcher):
        open_settings = replace(settings, admin_token="")
        engine = RAGEngine(open_settings, embedder=embedder, generator=generator, fetcher=fetcher)
        client = TestClient(create_app(open_settings, rag=engine))

        response = client.get("/api/admin/items", headers={"Authorization": "Bearer "})

        assert response.status_code == 500
        assert response.json() == {"error": "ADMIN_TOKEN not set on server"}


class TestAdminItems:
    def test_lists_groups(self, client, engine, admin_headers):
        engine.store.append([
            make_record(0, source="b.txt"),
            make_record(1, source="a.txt"),
            make_record(2, source="b.txt"),
        ])

        response = client.get("/api/admin/items", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {
            "total": 3,
            "groups": [
                {"source": "a.txt", "type": "file", "count": 1},
                {"source": "b.txt", "type": "file", "count": 2},
            ],
        }

    def test_delete_source(self, client, engine, admin_headers):
        engine.store.append([make_record(0, source="a.txt"), make_record(1, source="b.txt")])

        response = client.delete("/api/admin/source", params={"source": "a.txt"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"removed": 1}
        assert [r.source for r in engine.store.snapshot()] == ["b.txt"]

    def test_delete_without_source_is_400(self, client, admin_headers):
        response = client.delete("/api/admin/source", headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "source query required"}


class TestAdminIngest:
    def test_upload_indexes_files(self, client, engine, settings, admin_headers):
        response = client.post(
            "/api/admin/upload",
            files=[
                ("files", ("one.txt", b"abcdefghijklmnop", "text/plain")),
                ("files", ("two.txt", b"short", "text/plain")),
            ],
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json() == {"ok": True, "indexed": 3}
        assert len(list(settings.files_dir.iterdir())) == 2
        assert len(engine.store) == 3

    def test_upload_without_files_is_400(self, client, admin_headers):
        response = client.post(
            "/api/admin/upload",
            files=[("other", ("one.txt", b"abc", "text/plain"))],
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json() == {"error": "no files"}

    def test_add_url(self, client, engine, fetcher, settings, admin_headers):
        fetcher.pages["https://docs.example/faq"] = "abcdefghijklmnop"

        response = client.post("/api/admin/add-url", json={"url": " https://docs.example/faq "}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"ok": True, "indexed": 2}
        assert settings.urls_file.read_text(encoding="utf-8") == "https://docs.example/faq\n"

    def test_add_blank_url_is_400(self, client, admin_headers):
        response = client.post("/api/admin/add-url", json={"url": "  "}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "url required"}

    def test_add_url_fetch_failure_is_500(self, client, admin_headers):
        response = client.post("/api/admin/add-url", json={"url": "https://docs.example/gone"}, headers=admin_headers)
        assert response.status_code == 500
        assert response.json() == {"error": "Fetch failed 404 for https://docs.example/gone"}

    def test_rebuild(self, client, engine, fetcher, settings, admin_headers):
        fetcher.pages["https://docs.example/faq"] = "abcdefghijklmnop"
        settings.urls_file.write_text("https://docs.example/faq\nhttps://docs.example/gone\n", encoding="utf-8")
        (settings.files_dir / "kept.txt").write_text("short", encoding="utf-8")

        response = client.post("/api/admin/rebuild", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["items"] == 3
        assert [f["source"] for f in data["failures"]] == ["https://docs.example/gone"]
        assert len(engine.store) == 3


@pytest.mark.parametrize("path", ["/api/admin/items", "/api/admin/source"])
def test_admin_routes_reject_before_doing_work(client, engine, path):
    engine.store.append([make_record(0)])
    method = client.get if path.endswith("items") else client.delete
    response = method(path, params={"source": "doc.txt"})
    assert response.status_code == 401
    assert len(engine.store) == 1


class TestUnexpectedErrors:
    @pytest.fixture
    def lenient_client(self, settings, engine):
        return TestClient(create_app(settings, rag=engine), raise_server_exceptions=False)

    def test_delete_write_failure_is_json_500(self, lenient_client, engine, settings, admin_headers):
        engine.store.append([make_record(0)])
        engine.store.path = settings.data_dir

        response = lenient_client.delete("/api/admin/source", params={"source": "doc.txt"}, headers=admin_headers)

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/json")
        assert "error" in response.json()

    def test_unhandled_route_error_is_json_500(self, lenient_client, engine, admin_headers):
        def broken_sources():
            raise RuntimeError("index listing failed")

        engine.store.sources = broken_sources

        response = lenient_client.get("/api/admin/items", headers=admin_headers)

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == {"error": "index listing failed"}
