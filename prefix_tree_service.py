"""
Prefix Tree Lookup Service — a REST API for path-prefix routing tables.

Exposes a PrefixTree keyed by URL path segments as a JSON API with endpoints
for inserting, exact lookups, shortest-prefix matching, in-place replacement
and removal. Built with Flask. Designed for containerized deployment.
"""

from __future__ import annotations

import os
import time
import logging

from flask import Flask, jsonify, request

from prefix_tree import MISSING, PrefixTree

MAX_PATH_LENGTH = 256

app = Flask(__name__)
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger("prefix-tree-service")

# Global tree instance — persists for the lifetime of the process
tree = PrefixTree()
_start_time = time.time()

# Seed with sample routes so the service is useful out-of-the-box
_SEED_ROUTES = {
    "/api": "api-gateway",
    "/api/v2": "api-gateway-v2",
    "/api/internal/metrics": "metrics-exporter",
    "/assets": "static-files",
    "/assets/fonts": "font-cdn",
    "/auth": "auth-service",
    "/docs": "documentation",
    "/users/admin": "admin-panel",
    "/users/profile": "profile-service",
    "/ws": "websocket-hub",
}


def split_path(path: str) -> list[str]:
    """Turn ``/a/b/`` into ``['a', 'b']``; ``/`` and ``''`` become ``[]``."""
    path = path.strip().strip("/")
    if not path:
        return []
    return [segment for segment in path.split("/") if segment]


def join_path(segments) -> str:
    return "/" + "/".join(segments)


def seed(target: PrefixTree) -> int:
    for route, handler in _SEED_ROUTES.items():
        target.insert(split_path(route), handler)
    logger.info("Seeded tree with %d routes", len(_SEED_ROUTES))
    return len(_SEED_ROUTES)


if os.environ.get("PREFIX_TREE_SEED", "1") != "0":
    seed(tree)


def _path_from_query():
    """Return ``(segments, error_response)`` for the ``path`` query parameter."""
    if "path" not in request.args:
        return None, (jsonify({"error": "Missing query parameter 'path'"}), 400)
    return _check_path(request.args["path"])


def _body_from_json():
    """Return ``(body, segments, error_response)`` for a JSON request body."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return None, None, (jsonify({"error": "Request body must be a JSON object"}), 400)
    path = body.get("path")
    if not isinstance(path, str):
        return None, None, (jsonify({"error": "Missing 'path' in request body"}), 400)
    segments, error = _check_path(path)
    return body, segments, error


def _check_path(path: str):
    if len(path) > MAX_PATH_LENGTH:
        return None, (
            jsonify({"error": f"Path too long (max {MAX_PATH_LENGTH} chars)"}),
            400,
        )
    return split_path(path), None


def _not_found(segments):
    return jsonify({"path": join_path(segments), "found": False}), 404


# ── Health & Info ─────────────────────────────────────────────────────────

@app.route("/")
def index():
    """Landing page with API documentation."""
    return jsonify({
        "service": "Prefix Tree Lookup Service",
        "version": "1.0.0",
        "description": "REST API for path-prefix routing backed by a prefix tree",
        "endpoints": {
            "GET  /":                   "This help page",
            "GET  /health":             "Health check",
            "GET  /stats":              "Tree statistics",
            "GET  /lookup?path=<p>":    "Exact match lookup",
            "PUT  /lookup":             "Replace an exact value  {\"path\": \"...\", \"value\": ...}",
            "DELETE /lookup?path=<p>":  "Remove an exact match",
            "GET  /match?path=<p>":     "Shortest stored prefix of the path",
            "PUT  /match":              "Replace the shortest-prefix value  {\"path\": \"...\", \"value\": ...}",
            "DELETE /match?path=<p>":   "Remove the shortest-prefix value",
            "POST /insert":             "Insert a path  {\"path\": \"...\", \"value\": ...}",
        },
    })


@app.route("/health")
def health():
    """Liveness / readiness probe."""
    return jsonify({
        "status": "healthy",
        "uptime_seconds": round(time.time() - _start_time, 2),
        "entries": len(tree),
    })


@app.route("/stats")
def stats():
    """Tree statistics."""
    return jsonify({
        "entries": len(tree),
        "nodes": tree.node_count(),
        "uptime_seconds": round(time.time() - _start_time, 2),
        "seed_routes": len(_SEED_ROUTES),
    })


# ── Exact match ───────────────────────────────────────────────────────────

@app.route("/lookup", methods=["GET"])
def lookup():
    """Exact path lookup."""
    segments, error = _path_from_query()
    if error:
        return error
    value = tree.get_exact_match(segments, MISSING)
    if value is MISSING:
        return _not_found(segments)
    return jsonify({"path": join_path(segments), "found": True, "value": value})


@app.route("/lookup", methods=["PUT"])
def replace_lookup():
    """Replace the value stored at exactly the given path."""
    body, segments, error = _body_from_json()
    if error:
        return error
    if "value" not in body:
        return jsonify({"error": "Missing 'value' in request body"}), 400
    previous = tree.replace_exact_match(segments, body["value"], MISSING)
    if previous is MISSING:
        return _not_found(segments)
    logger.info("Replaced path=%s", join_path(segments))
    return jsonify({
        "path": join_path(segments),
        "value": body["value"],
        "previous": previous,
    })


@app.route("/lookup", methods=["DELETE"])
def remove_lookup():
    """Remove the value stored at exactly the given path."""
    segments, error = _path_from_query()
    if error:
        return error
    removed = tree.remove_exact_match(segments, MISSING)
    if removed is MISSING:
        return _not_found(segments)
    logger.info("Removed path=%s", join_path(segments))
    return jsonify({
        "path": join_path(segments),
        "removed": removed,
        "entries": len(tree),
    })


# ── Shortest prefix ───────────────────────────────────────────────────────

@app.route("/match", methods=["GET"])
def match():
    """Return the value at the shortest stored prefix of the path."""
    segments, error = _path_from_query()
    if error:
        return error
    # The tree consumes segments lazily; whatever is left is the remainder.
    cursor = iter(segments)
    value = tree.get_by_shortest_prefix(cursor, MISSING)
    if value is MISSING:
        return _not_found(segments)
    remainder = list(cursor)
    matched = segments[: len(segments) - len(remainder)]
    return jsonify({
        "path": join_path(segments),
        "found": True,
        "matched": join_path(matched),
        "remainder": join_path(remainder),
        "value": value,
    })


@app.route("/match", methods=["PUT"])
def replace_match():
    """Replace the value at the shortest stored prefix of the path."""
    body, segments, error = _body_from_json()
    if error:
        return error
    if "value" not in body:
        return jsonify({"error": "Missing 'value' in request body"}), 400
    previous = tree.replace_by_shortest_prefix(segments, body["value"], MISSING)
    if previous is MISSING:
        return _not_found(segments)
    logger.info("Replaced shortest prefix of path=%s", join_path(segments))
    return jsonify({
        "path": join_path(segments),
        "value": body["value"],
        "previous": previous,
    })


@app.route("/match", methods=["DELETE"])
def remove_match():
    """Remove the value at the shortest stored prefix of the path."""
    segments, error = _path_from_query()
    if error:
        return error
    cursor = iter(segments)
    removed = tree.remove_by_shortest_prefix(cursor, MISSING)
    if removed is MISSING:
        return _not_found(segments)
    matched = segments[: len(segments) - len(list(cursor))]
    logger.info("Removed prefix=%s for path=%s", join_path(matched), join_path(segments))
    return jsonify({
        "path": join_path(segments),
        "matched": join_path(matched),
        "removed": removed,
        "entries": len(tree),
    })


# ── Insert ────────────────────────────────────────────────────────────────

@app.route("/insert", methods=["POST"])
def insert():
    """Insert a path into the tree."""
    body, segments, error = _body_from_json()
    if error:
        return error
    value = body.get("value", join_path(segments))

    previous = tree.insert(segments, value)
    logger.info("Inserted path=%s", join_path(segments))
    return jsonify({
        "inserted": join_path(segments),
        "value": value,
        "previous": previous,
        "entries": len(tree),
    }), 201


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    debug = os.environ.get("FLASK_DEBUG", "0") == "1"
    logger.info("Starting Prefix Tree Lookup Service on port %d", port)
    app.run(host="0.0.0.0", port=port, debug=debug)
