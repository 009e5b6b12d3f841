"""
GitHub REST access for the profile visualizer.

Two sequential, unauthenticated calls per lookup:
  GET /users/{username}
  GET /users/{username}/repos?per_page=100&sort=updated

No retries, no caching and no pagination beyond the first 100 repositories.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

# -----------------------------
# Config
# -----------------------------
GITHUB_API_BASE = os.getenv("GITHUB_API_BASE", "https://api.github.com").rstrip("/")
API_VERSION = os.getenv("GITHUB_API_VERSION", "2022-11-28")
REQUEST_TIMEOUT_SECONDS = float(os.getenv("GITHUB_TIMEOUT_SECONDS", "20"))
REPOS_PER_PAGE = 100


# -----------------------------
# Errors
# -----------------------------
class GitHubAPIError(RuntimeError):
    pass


class UserNotFound(GitHubAPIError):
    pass


class NetworkError(GitHubAPIError):
    pass


class MalformedResponse(GitHubAPIError):
    pass


# -----------------------------
# Records
# -----------------------------
def _count(payload: Dict[str, Any], key: str) -> int:
    return max(0, int(payload.get(key) or 0))


def _text(payload: Dict[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise MalformedResponse(f"Expected a string for {key!r}, got {type(value).__name__}.")
    return value


def _required_text(payload: Dict[str, Any], key: str) -> str:
    value = _text(payload, key)
    if value is None:
        raise MalformedResponse(f"Missing required field {key!r}.")
    return value


@dataclass(frozen=True)
class UserProfile:
    login: str
    name: Optional[str]
    avatar_url: str
    bio: Optional[str]
    location: Optional[str]
    followers: int
    following: int
    public_repos: int
    html_url: str

    @property
    def display_name(self) -> str:
        return self.name or self.login

    @classmethod
    def from_api(cls, payload: Any) -> "UserProfile":
        if not isinstance(payload, dict):
            raise MalformedResponse("Unexpected profile payload (expected a JSON object).")
        try:
            return cls(
                login=_required_text(payload, "login"),
                name=_text(payload, "name"),
                avatar_url=_text(payload, "avatar_url") or "",
                bio=_text(payload, "bio"),
                location=_text(payload, "location"),
                followers=_count(payload, "followers"),
                following=_count(payload, "following"),
                public_repos=_count(payload, "public_repos"),
                html_url=_text(payload, "html_url") or "",
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponse(f"Malformed profile payload: {e!r}") from e


@dataclass(frozen=True)
class RepositorySummary:
    id: int
    name: str
    description: Optional[str]
    language: Optional[str]
    stargazers_count: int
    forks_count: int
    updated_at: str
    html_url: str

    @classmethod
    def from_api(cls, payload: Any) -> "RepositorySummary":
        if not isinstance(payload, dict):
            raise MalformedResponse("Unexpected repository entry (expected a JSON object).")
        try:
            return cls(
                id=int(payload["id"]),
                name=_required_text(payload, "name"),
                description=_text(payload, "description"),
                language=_text(payload, "language"),
                stargazers_count=_count(payload, "stargazers_count"),
                forks_count=_count(payload, "forks_count"),
                updated_at=_text(payload, "updated_at") or "",
                html_url=_text(payload, "html_url") or "",
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponse(f"Malformed repository entry: {e!r}") from e


# -----------------------------
# HTTP helpers
# -----------------------------
def _headers() -> Dict[str, str]:
    return {
        "Accept": "application/vnd.github+json",
        "User-Agent": "github-profile-visualizer",
        "X-GitHub-Api-Version": API_VERSION,
    }


def _get(url: str, *, params: Optional[dict] = None) -> requests.Response:
    logger.debug("GET %s params=%s", url, params)
    try:
        return requests.get(url, headers=_headers(), params=params, timeout=REQUEST_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        raise NetworkError(f"Could not reach GitHub: {e}") from e


def _json(resp: requests.Response, what: str) -> Any:
    try:
        return resp.json()
    except ValueError as e:
        raise MalformedResponse(f"GitHub returned a non-JSON {what} response.") from e


# -----------------------------
# Fetcher
# -----------------------------
def fetch_profile(username: str) -> Optional[Tuple[UserProfile, List[RepositorySummary]]]:
    """
    Fetch a user's profile and up to 100 repositories, most recently updated first.

    Returns None without touching the network when username is empty.
    The repositories request is only issued after the profile request succeeds.
    """
    username = (username or "").strip()
    if not username:
        return None

    user_url = f"{GITHUB_API_BASE}/users/{requests.utils.quote(username, safe='')}"

    resp = _get(user_url)
    if not resp.ok:
        logger.info("Profile lookup for %r returned HTTP %s", username, resp.status_code)
        raise UserNotFound("User not found")
    profile = UserProfile.from_api(_json(resp, "profile"))

    resp = _get(f"{user_url}/repos", params={"per_page": REPOS_PER_PAGE, "sort": "updated"})
    if not resp.ok:
        raise MalformedResponse(f"Repository list unavailable (GitHub returned {resp.status_code}).")
    data = _json(resp, "repository list")
    if not isinstance(data, list):
        raise MalformedResponse("Unexpected repository list payload (expected a JSON array).")

    repos = [RepositorySummary.from_api(item) for item in data]
    logger.debug("Fetched %d repositories for %s", len(repos), profile.login)
    return profile, repos
