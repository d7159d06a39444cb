"""JSON API for the curation dashboard."""

import hmac
import logging
import math
from functools import wraps
from typing import Any, List, Optional

import psycopg
from flask import Flask, jsonify, request

from ..analysis import match_category
from ..newsletter import format_newsletter
from ..pipeline import PipelineOrchestrator
from .tasks import BackgroundTasks

logger = logging.getLogger(__name__)


def _parse_id(value: str) -> Optional[int]:
    """Positive integer id, or None."""
    try:
        article_id = int(value)
    except (TypeError, ValueError):
        return None
    return article_id if article_id > 0 else None


def _parse_ids(values: Any) -> Optional[List[int]]:
    """Non-empty list of integer ids, or None when the payload is malformed."""
    if not isinstance(values, list) or not values:
        return None
    ids = []
    for value in values:
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            return None
        ids.append(value)
    return ids


def _request_data() -> dict:
    """JSON body if present, else form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def create_app(
    orchestrator: PipelineOrchestrator,
    tasks: Optional[BackgroundTasks] = None,
) -> Flask:
    """Build the Flask app around an already wired orchestrator."""
    app = Flask(__name__)
    app.json.sort_keys = False
    tasks = tasks or BackgroundTasks()
    app.extensions["feedcurator"] = {"orchestrator": orchestrator, "tasks": tasks}

    settings = orchestrator.config.config
    articles = orchestrator.articles
    registry = orchestrator.registry

    def trigger_auth(f):
        """Require ``Authorization: Bearer <secret>`` when a cron secret is set."""

        @wraps(f)
        def decorated_function(*args, **kwargs):
            secret = orchestrator.config.get_cron_secret()
            if secret:
                header = request.headers.get("Authorization", "")
                if not hmac.compare_digest(header, f"Bearer {secret}"):
                    return jsonify({"success": False, "error": "Unauthorized"}), 401
            return f(*args, **kwargs)

        return decorated_function

    @app.errorhandler(psycopg.Error)
    def database_error(e):
        logger.error("Database error on %s: %s", request.path, e)
        return jsonify({"success": False, "error": "Database unavailable"}), 500

    # Pipelines

    @app.route("/api/cron/ingest", methods=["GET", "POST"])
    @trigger_auth
    def cron_ingest():
        result = orchestrator.run_ingestion()
        return jsonify({"success": True, **result.model_dump()})

    @app.route("/api/analyze", methods=["POST"])
    @trigger_auth
    def analyze():
        limit = request.args.get("limit", type=int)
        if limit is None or limit < 1:
            limit = settings.analysis.batch_size

        if request.args.get("background") == "true":
            tasks.submit(orchestrator.analyze_next, limit)
            return jsonify({"success": True, "queued": True}), 202

        try:
            result = orchestrator.analyze_next(limit)
        except ValueError as e:
            logger.error("Classifier unavailable: %s", e)
            return jsonify({"success": False, "error": str(e)}), 500
        return jsonify({"success": True, **result.model_dump()})

    @app.route("/api/share", methods=["POST"])
    def share():
        data = _request_data()
        url = (data.get("url") or "").strip()
        if not url:
            return jsonify({"ok": False, "error": "Missing url"}), 400

        try:
            shared = orchestrator.share(
                url,
                title=data.get("title") or None,
                category=match_category(data.get("category")),
            )
        except ValueError as e:
            return jsonify({"ok": False, "error": str(e)}), 400

        if shared.created and settings.analysis.analyze_on_share:
            tasks.submit(orchestrator.analyze_article_by_id, shared.id)

        return jsonify({"ok": True, **shared.model_dump()})

    # Articles

    @app.route("/api/articles", methods=["GET"])
    def list_articles():
        min_score = request.args.get("minScore", type=float)
        if min_score is None or not math.isfinite(min_score):
            min_score = settings.server.default_min_score
        include_read = request.args.get("includeRead") == "true"

        rows = articles.list_articles(min_score, include_read=include_read)
        return jsonify({"data": [a.to_api_dict() for a in rows]})

    def _set_read(article_id: str, is_read: bool):
        parsed = _parse_id(article_id)
        if parsed is None:
            return jsonify({"ok": False, "error": "Invalid article id"}), 400
        if not articles.set_read_state([parsed], is_read):
            return jsonify({"ok": False, "error": "Article not found"}), 404
        return jsonify({"ok": True})

    @app.route("/api/articles/<article_id>/mark-read", methods=["POST"])
    def mark_read(article_id):
        return _set_read(article_id, True)

    @app.route("/api/articles/<article_id>/mark-unread", methods=["POST"])
    def mark_unread(article_id):
        return _set_read(article_id, False)

    @app.route("/api/articles/mark-read-bulk", methods=["POST"])
    def mark_read_bulk():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"ok": False, "error": "Expected a JSON object"}), 400

        ids = _parse_ids(data.get("ids"))
        if ids is None:
            return jsonify({"ok": False, "error": "ids must be a non-empty list of integers"}), 400

        is_read = data.get("isRead", True)
        if not isinstance(is_read, bool):
            return jsonify({"ok": False, "error": "isRead must be a boolean"}), 400

        updated = articles.set_read_state(ids, is_read)
        return jsonify({"ok": True, "updated": updated})

    @app.route("/api/articles/<article_id>/category", methods=["POST"])
    def set_category(article_id):
        parsed = _parse_id(article_id)
        if parsed is None:
            return jsonify({"ok": False, "error": "Invalid article id"}), 400

        data = _request_data()
        category = match_category(data.get("category"))
        if category is None:
            return jsonify({"ok": False, "error": "Unknown category"}), 400

        if not articles.update_article_category(parsed, category):
            return jsonify({"ok": False, "error": "Article not found"}), 404
        return jsonify({"ok": True, "category": category})

    @app.route("/api/articles/<article_id>/reanalyze", methods=["POST"])
    @trigger_auth
    def reanalyze(article_id):
        parsed = _parse_id(article_id)
        if parsed is None:
            return jsonify({"ok": False, "error": "Invalid article id"}), 400

        try:
            analyzed = orchestrator.reanalyze(parsed)
        except LookupError:
            return jsonify({"ok": False, "error": "Article not found"}), 404
        except ValueError as e:
            logger.error("Classifier unavailable: %s", e)
            return jsonify({"ok": False, "error": str(e)}), 500

        if not analyzed:
            return jsonify({"ok": False, "error": "Analysis failed"}), 500

        article = articles.get_article_by_id(parsed)
        return jsonify({"ok": True, "article": article.to_api_dict() if article else None})

    @app.route("/api/newsletter", methods=["POST"])
    def newsletter():
        data = request.get_json(silent=True)
        ids = _parse_ids(data.get("ids") if isinstance(data, dict) else None)
        if ids is None:
            return jsonify({"ok": False, "error": "ids must be a non-empty list of integers"}), 400

        selected = articles.get_articles_by_ids(ids)
        return jsonify({"ok": True, "count": len(selected), "text": format_newsletter(selected)})

    # Registry

    @app.route("/api/feeds", methods=["GET"])
    def list_feeds():
        include_inactive = request.args.get("includeInactive") == "true"
        feeds = registry.list_feeds(include_inactive=include_inactive)
        return jsonify({"data": [f.model_dump(mode="json") for f in feeds]})

    @app.route("/api/feeds", methods=["POST"])
    def add_feed():
        data = _request_data()
        name = (data.get("name") or "").strip()
        url = (data.get("url") or "").strip()
        if not name or not url:
            return jsonify({"ok": False, "error": "name and url are required"}), 400

        try:
            feed = registry.add_feed(name, url, category=data.get("category") or None)
        except ValueError as e:
            return jsonify({"ok": False, "error": str(e)}), 400
        return jsonify({"ok": True, "feed": feed.model_dump(mode="json")}), 201

    @app.route("/api/feeds/<feed_id>", methods=["DELETE"])
    def delete_feed(feed_id):
        parsed = _parse_id(feed_id)
        if parsed is None:
            return jsonify({"ok": False, "error": "Invalid feed id"}), 400
        if not registry.deactivate_feed(parsed):
            return jsonify({"ok": False, "error": "Feed not found"}), 404
        return jsonify({"ok": True})

    @app.route("/api/blacklist", methods=["GET"])
    def list_blacklist():
        return jsonify({"data": [k.model_dump(mode="json") for k in registry.list_blacklist()]})

    @app.route("/api/blacklist", methods=["POST"])
    def add_blacklist_keyword():
        data = _request_data()
        try:
            keyword = registry.add_blacklist_keyword(data.get("keyword") or "")
        except ValueError as e:
            return jsonify({"ok": False, "error": str(e)}), 400
        return jsonify({"ok": True, "keyword": keyword.model_dump(mode="json")}), 201

    @app.route("/api/blacklist/<keyword_id>", methods=["DELETE"])
    def delete_blacklist_keyword(keyword_id):
        parsed = _parse_id(keyword_id)
        if parsed is None:
            return jsonify({"ok": False, "error": "Invalid keyword id"}), 400
        if not registry.delete_blacklist_keyword(parsed):
            return jsonify({"ok": False, "error": "Keyword not found"}), 404
        return jsonify({"ok": True})

    return app
