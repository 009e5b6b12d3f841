"""Shared test fixtures."""

import pytest
import requests

import github_api


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else ""

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeGitHub:
    """Stands in for requests.get; answers by URL and records every call."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, path, response):
        self.routes[f"{github_api.GITHUB_API_BASE}{path}"] = response

    def urls(self):
        return [url for url, _ in self.calls]

    def __call__(self, url, headers=None, params=None, timeout=None):
        self.calls.append((url, params))
        response = self.routes.get(url)
        if isinstance(response, Exception):
            raise response
        if response is None:
            return FakeResponse(404, {"message": "Not Found"})
        return response


def repo_payload(id, language, name=None, updated_at="2024-03-05T10:00:00Z"):
    return {
        "id": id,
        "name": name or f"repo-{id}",
        "description": None,
        "language": language,
        "stargazers_count": id,
        "forks_count": 0,
        "updated_at": updated_at,
        "html_url": f"https://github.com/octocat/repo-{id}",
    }


@pytest.fixture
def profile_payload():
    return {
        "login": "octocat",
        "name": "The Octocat",
        "avatar_url": "https://avatars.githubusercontent.com/u/583231",
        "bio": None,
        "location": "San Francisco",
        "followers": 42,
        "following": 9,
        "public_repos": 3,
        "html_url": "https://github.com/octocat",
    }


@pytest.fixture
def repos_payload():
    return [
        repo_payload(1, "TypeScript", updated_at="2024-03-05T10:00:00Z"),
        repo_payload(2, "TypeScript", updated_at="2024-02-01T08:30:00Z"),
        repo_payload(3, None, updated_at="2023-12-24T00:00:00Z"),
    ]


@pytest.fixture
def fake_github(monkeypatch):
    fake = FakeGitHub()
    monkeypatch.setattr(requests, "get", fake)
    return fake


@pytest.fixture
def octocat(fake_github, profile_payload, repos_payload):
    fake_github.add("/users/octocat", FakeResponse(200, profile_payload))
    fake_github.add("/users/octocat/repos", FakeResponse(200, repos_payload))
    return fake_github


@pytest.fixture
def make_repo():
    return repo_payload


@pytest.fixture
def fake_response():
    return FakeResponse
