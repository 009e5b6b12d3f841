"""
GitHub Profile Visualizer (Flask)

What it does:
- Accepts a GitHub username
- Fetches the public profile and the 100 most recently updated repositories (REST)
- Tallies primary languages across those repositories
- Renders a profile card, a language pie chart and the latest repositories

Setup:
  pip install -e .

Run:
  python app.py
  open http://localhost:5000

Endpoints:
  GET  /?username=              -> renders templates/index.html
  GET  /api/profile?username=   -> returns JSON lookup result
  POST /api/profile             -> accepts form-data or JSON { "username": "..." }
  GET  /api/lookup              -> the most recently committed lookup result
  GET  /healthz
"""

from __future__ import annotations

import logging
import os
import re
from typing import Optional

from flask import Flask, jsonify, render_template, request

from github_api import GITHUB_API_BASE, UserNotFound
from languages import chart_data, format_date, pie_slices
from lookup import LookupStatus, ProfileLookup

logger = logging.getLogger(__name__)

# -----------------------------
# Flask app
# -----------------------------
app = Flask(__name__)
app.jinja_env.filters["short_date"] = format_date

# -----------------------------
# Config
# -----------------------------
REPOS_DISPLAY_COUNT = int(os.getenv("REPOS_DISPLAY_COUNT", "6"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Username validation (GitHub allows alnum and hyphen; max length 39)
USERNAME_RE = re.compile(r"^[A-Za-z0-9-]{1,39}$")

# One lookup controller per process; the page shows whatever it last committed.
lookup = ProfileLookup()

ERROR_STATUS = {UserNotFound: 404}


# -----------------------------
# Flask routes
# -----------------------------
@app.route("/", methods=["GET"])
def home():
    username = (request.args.get("username") or "").strip()
    result = lookup.submit(username) if username else lookup.current
    return render_template(
        "index.html",
        username=username or result.username,
        result=result,
        slices=pie_slices(result.languages),
        latest_repos=result.repositories[:REPOS_DISPLAY_COUNT],
    )


def _error_status(error_type) -> int:
    for known, code in ERROR_STATUS.items():
        if error_type is not None and issubclass(error_type, known):
            return code
    return 502


def _get_username_from_request() -> Optional[str]:
    """Empty string when absent, None when the submitted value is not a string."""
    if request.method == "GET":
        value = request.args.get("username")
    elif request.is_json:
        payload = request.get_json(silent=True)
        value = payload.get("username") if isinstance(payload, dict) else None
    else:
        value = request.form.get("username")

    if value is None:
        return ""
    if not isinstance(value, str):
        return None
    return value.strip()


@app.route("/api/profile", methods=["GET", "POST"])
def api_profile():
    username = _get_username_from_request()

    if username is None:
        return jsonify({"error": "Invalid GitHub username format."}), 400

    if not username:
        return jsonify({"error": "Missing 'username'."}), 400

    if not USERNAME_RE.match(username):
        return jsonify({"error": "Invalid GitHub username format."}), 400

    result = lookup.submit(username)
    if result.status is LookupStatus.FAILED:
        return jsonify(result.to_dict()), _error_status(result.error_type)

    return jsonify({**result.to_dict(), "chart": chart_data(result.languages)})


@app.route("/api/lookup", methods=["GET"])
def api_lookup():
    return jsonify(lookup.current.to_dict())


@app.route("/healthz", methods=["GET"])
def healthz():
    return jsonify({"ok": True, "github_api_base": GITHUB_API_BASE, "repos_display_count": REPOS_DISPLAY_COUNT})


if __name__ == "__main__":
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    port = int(os.getenv("PORT", "5000"))
    app.run(host="0.0.0.0", port=port, debug=True)
