"""
Lookup state for the visualizer.

ProfileLookup owns the single "what is on screen" value. Every transition
replaces it with a new immutable LookupResult; a lookup that was overtaken by
a newer submission never commits.
"""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Type

from github_api import GitHubAPIError, RepositorySummary, UserProfile, fetch_profile
from languages import aggregate_languages

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Optional[Tuple[UserProfile, List[RepositorySummary]]]]


class LookupStatus(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class LookupResult:
    status: LookupStatus = LookupStatus.IDLE
    username: str = ""
    profile: Optional[UserProfile] = None
    repositories: Tuple[RepositorySummary, ...] = ()
    languages: Mapping[str, int] = field(default_factory=dict)
    error: Optional[str] = None
    error_kind: Optional[str] = None
    error_type: Optional[Type[BaseException]] = field(default=None, compare=False, repr=False)
    generation: int = 0

    def __post_init__(self) -> None:
        # Own a read-only copy so a committed result cannot change under its readers.
        object.__setattr__(self, "languages", MappingProxyType(dict(self.languages)))

    @property
    def loading(self) -> bool:
        return self.status is LookupStatus.LOADING

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "username": self.username,
            "profile": asdict(self.profile) if self.profile else None,
            "repositories": [asdict(r) for r in self.repositories],
            "languages": dict(self.languages),
            "error": self.error,
            "error_kind": self.error_kind,
        }


class ProfileLookup:
    """Runs lookups and keeps the most recently started one's result as `current`."""

    def __init__(self, fetcher: Fetcher = fetch_profile):
        self._fetcher = fetcher
        self._lock = threading.Lock()
        self._generation = 0
        self._current = LookupResult()

    @property
    def current(self) -> LookupResult:
        with self._lock:
            return self._current

    def _commit(self, result: LookupResult) -> bool:
        with self._lock:
            if result.generation != self._generation:
                return False
            self._current = result
            return True

    def submit(self, username: str) -> LookupResult:
        username = (username or "").strip()
        if not username:
            return self.current

        with self._lock:
            self._generation += 1
            generation = self._generation
            self._current = LookupResult(status=LookupStatus.LOADING, username=username, generation=generation)

        try:
            fetched = self._fetcher(username)
            if fetched is None:
                raise GitHubAPIError("No data returned for lookup.")
            profile, repos = fetched
            result = LookupResult(
                status=LookupStatus.SUCCESS,
                username=username,
                profile=profile,
                repositories=tuple(repos),
                languages=aggregate_languages(repos),
                generation=generation,
            )
            logger.info("Lookup %r: %d repositories, %d languages", username, len(repos), len(result.languages))
        except GitHubAPIError as e:
            logger.warning("Lookup %r failed: %s", username, e)
            result = LookupResult(
                status=LookupStatus.FAILED,
                username=username,
                error=str(e),
                error_kind=type(e).__name__,
                error_type=type(e),
                generation=generation,
            )
        except Exception:
            self._commit(
                LookupResult(
                    status=LookupStatus.FAILED,
                    username=username,
                    error="Unexpected error during lookup.",
                    error_kind="UnexpectedError",
                    generation=generation,
                )
            )
            raise

        if not self._commit(result):
            logger.info("Lookup %r superseded by a newer submission; not committed", username)
        return result
