"""Integration tests for the HTTP API, using Flask's test client."""

from unittest.mock import MagicMock

import psycopg
import pytest

from feedcurator.web import create_app

from ..conftest import classifier_json


class ImmediateTasks:
    """Runs submitted work inline so results are visible to the test."""

    def __init__(self):
        self.submitted = []

    def submit(self, fn, *args, **kwargs):
        self.submitted.append((fn.__name__, args))
        return fn(*args, **kwargs)

    def shutdown(self, wait=True):
        pass


@pytest.fixture
def tasks():
    return ImmediateTasks()


@pytest.fixture
def client(orchestrator, tasks, monkeypatch):
    monkeypatch.delenv("CRON_SECRET", raising=False)
    app = create_app(orchestrator, tasks=tasks)
    app.config["TESTING"] = True
    return app.test_client()


class TestShare:
    """Tests for POST /api/share."""

    def test_share_json(self, client, store, tasks):
        response = client.post("/api/share", json={"url": "https://example.com/kit"})

        assert response.status_code == 200
        body = response.get_json()
        assert body["ok"] is True
        assert body["created"] is True
        assert body["title"] == "Club signs kit deal"

        article = store.get_article_by_id(body["id"])
        assert article.source == "share-target"
        assert tasks.submitted == [("analyze_article_by_id", (body["id"],))]
        assert article.analysis_json is not None

    def test_share_form(self, client, store):
        response = client.post(
            "/api/share",
            data={"url": "https://example.com/kit", "title": "Shared title", "category": "football"},
        )

        body = response.get_json()
        article = store.get_article_by_id(body["id"])
        assert article.title == "Shared title"
        assert article.category == "Football"

    def test_missing_url(self, client, store):
        response = client.post("/api/share", json={"title": "No url"})

        assert response.status_code == 400
        assert response.get_json()["ok"] is False
        assert store.rows == {}

    @pytest.mark.parametrize(
        "payload",
        [{"url": "https://e.com/a\tb", "title": "T"}, {"url": "https://e.com/a\tb"}],
    )
    def test_unrequestable_url_rejected(self, client, store, payload):
        response = client.post("/api/share", json=payload)

        assert response.status_code == 400
        assert response.get_json()["ok"] is False
        assert store.rows == {}

    def test_existing_url_not_requeued(self, client, store, tasks):
        store.add("https://example.com/kit")
        body = client.post("/api/share", json={"url": "https://example.com/kit"}).get_json()

        assert body["created"] is False
        assert tasks.submitted == []


class TestArticles:
    """Tests for the article listing and curation endpoints."""

    def test_listing_filters(self, client, store):
        store.add("https://www.a.com/1", relevance_score=8)
        store.add("https://b.com/2", relevance_score=2)
        store.add("https://c.com/3")
        store.add("https://d.com/4", relevance_score=9, is_read=True)

        data = client.get("/api/articles").get_json()["data"]

        assert {a["url"] for a in data} == {"https://www.a.com/1", "https://c.com/3"}
        assert {a["domain"] for a in data} == {"a.com", "c.com"}

    def test_listing_min_score_and_read(self, client, store):
        store.add("https://a.com/1", relevance_score=2)
        store.add("https://b.com/2", relevance_score=9, is_read=True)

        data = client.get("/api/articles?minScore=0&includeRead=true").get_json()["data"]
        assert len(data) == 2

    def test_non_numeric_min_score_uses_default(self, client, store):
        store.add("https://a.com/1", relevance_score=4)
        store.add("https://b.com/2", relevance_score=5)

        data = client.get("/api/articles?minScore=abc").get_json()["data"]
        assert [a["url"] for a in data] == ["https://b.com/2"]

    def test_fractional_min_score(self, client, store):
        store.add("https://a.com/1", relevance_score=5)
        store.add("https://b.com/2", relevance_score=6)

        data = client.get("/api/articles?minScore=5.5").get_json()["data"]
        assert [a["url"] for a in data] == ["https://b.com/2"]

    def test_mark_read_and_unread(self, client, store):
        article = store.add("https://a.com/1")

        assert client.post(f"/api/articles/{article.id}/mark-read").status_code == 200
        assert store.get_article_by_id(article.id).is_read is True

        assert client.post(f"/api/articles/{article.id}/mark-unread").status_code == 200
        assert store.get_article_by_id(article.id).is_read is False

    def test_mark_read_invalid_id(self, client):
        assert client.post("/api/articles/abc/mark-read").status_code == 400

    def test_mark_read_unknown_id(self, client):
        assert client.post("/api/articles/999/mark-read").status_code == 404

    def test_mark_read_bulk(self, client, store):
        ids = [store.add(f"https://a.com/{i}").id for i in range(3)]

        response = client.post("/api/articles/mark-read-bulk", json={"ids": ids[:2]})

        assert response.get_json() == {"ok": True, "updated": 2}
        assert [store.get_article_by_id(i).is_read for i in ids] == [True, True, False]

    def test_mark_unread_bulk(self, client, store):
        article = store.add("https://a.com/1", is_read=True)

        client.post("/api/articles/mark-read-bulk", json={"ids": [article.id], "isRead": False})
        assert store.get_article_by_id(article.id).is_read is False

    @pytest.mark.parametrize(
        "payload",
        [
            {"ids": []},
            {"ids": ["1"]},
            {"ids": [True]},
            {"ids": 3},
            {"ids": [1], "isRead": "yes"},
            ["not", "an", "object"],
        ],
    )
    def test_mark_read_bulk_rejects_bad_body(self, client, payload):
        assert client.post("/api/articles/mark-read-bulk", json=payload).status_code == 400

    def test_set_category(self, client, store):
        article = store.add("https://a.com/1")

        response = client.post(f"/api/articles/{article.id}/category", json={"category": "médias"})

        assert response.get_json()["category"] == "Médias"
        assert store.get_article_by_id(article.id).category == "Médias"

    def test_set_unknown_category(self, client, store):
        article = store.add("https://a.com/1")
        response = client.post(f"/api/articles/{article.id}/category", json={"category": "Curling"})
        assert response.status_code == 400

    def test_set_category_unknown_article(self, client):
        response = client.post("/api/articles/999/category", json={"category": "Golf"})
        assert response.status_code == 404


class TestPipelineTriggers:
    """Tests for ingestion and analysis triggers."""

    def test_cron_ingest(self, client, registry):
        registry.add_feed("Feed", "https://feed.example/rss")

        response = client.get("/api/cron/ingest")

        # The mocked client serves an HTML page, not a feed
        body = response.get_json()
        assert response.status_code == 200
        assert body["success"] is True
        assert body["ingested"] == 0
        assert body["feeds_processed"] + len(body["failed_feeds"]) == 1

    def test_cron_secret_required(self, client, monkeypatch):
        monkeypatch.setenv("CRON_SECRET", "s3cret")

        assert client.get("/api/cron/ingest").status_code == 401
        assert client.get("/api/cron/ingest", headers={"Authorization": "Bearer wrong"}).status_code == 401
        response = client.get("/api/cron/ingest", headers={"Authorization": "Bearer s3cret"})
        assert response.status_code == 200

    def test_analyze(self, client, store, llm):
        for i in range(7):
            store.add(f"https://a.com/{i}")

        body = client.post("/api/analyze").get_json()

        assert body["success"] is True
        assert body["analyzed"] == 5
        assert len(llm.prompts) == 5

    def test_analyze_survives_unrequestable_url(self, client, store):
        older = store.add("https://e.com/older")
        broken = store.add("https://e.com/a\tb")

        response = client.post("/api/analyze")

        assert response.status_code == 200
        assert response.get_json()["analyzed"] == 1
        assert store.get_article_by_id(older.id).analysis_json is not None
        assert store.get_article_by_id(broken.id).analysis_json is None

    def test_analyze_limit(self, client, store):
        for i in range(3):
            store.add(f"https://a.com/{i}")

        assert client.post("/api/analyze?limit=2").get_json()["analyzed"] == 2

    def test_analyze_background(self, client, store, tasks):
        store.add("https://a.com/1")

        response = client.post("/api/analyze?background=true")

        assert response.status_code == 202
        assert response.get_json() == {"success": True, "queued": True}
        assert tasks.submitted == [("analyze_next", (5,))]

    def test_reanalyze(self, client, store, llm):
        article = store.add("https://a.com/1", category="Golf", analysis_json={"category": "Golf"})
        llm.responses = [classifier_json(category="Rugby", relevance_score=7)]

        body = client.post(f"/api/articles/{article.id}/reanalyze").get_json()

        assert body["ok"] is True
        assert body["article"]["category"] == "Rugby"
        assert body["article"]["relevance_score"] == 7

    def test_reanalyze_unknown(self, client):
        assert client.post("/api/articles/999/reanalyze").status_code == 404

    def test_reanalyze_invalid_id(self, client):
        assert client.post("/api/articles/x/reanalyze").status_code == 400

    def test_reanalyze_failure(self, client, store, llm):
        article = store.add("https://a.com/1")
        llm.responses = ["no json here"]

        assert client.post(f"/api/articles/{article.id}/reanalyze").status_code == 500

    def test_database_unavailable(self, client, orchestrator):
        orchestrator.articles.list_articles = MagicMock(side_effect=psycopg.OperationalError("down"))

        response = client.get("/api/articles")

        assert response.status_code == 500
        assert response.get_json() == {"success": False, "error": "Database unavailable"}


class TestNewsletter:
    """Tests for POST /api/newsletter."""

    def test_snippet(self, client, store):
        a = store.add("https://www.lequipe.fr/a", title="A", source="L'Equipe", access_status="paywall")

        body = client.post("/api/newsletter", json={"ids": [a.id]}).get_json()

        assert body["text"] == "A - [L'Equipe](https://www.lequipe.fr/a) 💰"
        assert body["count"] == 1

    def test_bad_ids(self, client):
        assert client.post("/api/newsletter", json={"ids": "1,2"}).status_code == 400


class TestRegistryEndpoints:
    """Tests for feed and blacklist management."""

    def test_feed_lifecycle(self, client, registry):
        response = client.post("/api/feeds", json={"name": "Feed", "url": "https://feed.example/rss"})
        assert response.status_code == 201
        feed_id = response.get_json()["feed"]["id"]

        assert len(client.get("/api/feeds").get_json()["data"]) == 1
        assert client.delete(f"/api/feeds/{feed_id}").status_code == 200
        assert client.get("/api/feeds").get_json()["data"] == []
        assert len(client.get("/api/feeds?includeInactive=true").get_json()["data"]) == 1

    def test_feed_requires_name_and_url(self, client):
        assert client.post("/api/feeds", json={"name": "Feed"}).status_code == 400

    def test_delete_unknown_feed(self, client):
        assert client.delete("/api/feeds/42").status_code == 404

    def test_blacklist_lifecycle(self, client):
        response = client.post("/api/blacklist", json={"keyword": "casino"})
        assert response.status_code == 201
        keyword_id = response.get_json()["keyword"]["id"]

        assert client.post("/api/blacklist", json={"keyword": "Casino"}).status_code == 400
        assert [k["keyword"] for k in client.get("/api/blacklist").get_json()["data"]] == ["casino"]
        assert client.delete(f"/api/blacklist/{keyword_id}").status_code == 200
        assert client.get("/api/blacklist").get_json()["data"] == []

    def test_empty_keyword(self, client):
        assert client.post("/api/blacklist", json={"keyword": " "}).status_code == 400
