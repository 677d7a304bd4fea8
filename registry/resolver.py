"""Resolve GitHub repository URLs into raw-content, archive and browsable URLs."""

from __future__ import annotations

import logging
import re
from typing import Pattern, Protocol

from config import CONFIG
from registry.errors import BranchResolutionError, UnsupportedRepositoryError
from registry.models import ResolvedRepo

logger = logging.getLogger(__name__)

# Trailing segments after the optional /tree/<branch> are ignored
_GITHUB_PATTERN: Pattern[str] = re.compile(
    r"^https?://github\.com/(?P<owner>[^/]+)/(?P<name>[^/]+)(?:/tree/(?P<branch>[^/]+))?"
)


class ProbeClient(Protocol):
    def exists(self, url: str) -> bool: ...


def parse_repository_url(repo_url: str) -> tuple[str, str, str | None]:
    """Split a GitHub URL into ``(owner, name, branch)``; ``branch`` may be ``None``."""

    match = _GITHUB_PATTERN.match(repo_url.strip())
    if not match:
        raise UnsupportedRepositoryError(repo_url)
    return match.group("owner"), match.group("name"), match.group("branch")


def guess_default_branch(
    owner: str,
    name: str,
    client: ProbeClient,
    guesses: tuple[str, ...] | None = None,
) -> str | None:
    """Return the first guessed branch whose tree page exists, or ``None``."""

    for guess in guesses if guesses is not None else CONFIG.network.branch_guesses:
        if client.exists(f"https://github.com/{owner}/{name}/tree/{guess}"):
            return guess
    return None


def resolve_repository(repo_url: str, client: ProbeClient) -> ResolvedRepo:
    """
    Resolve ``repo_url`` into a :class:`ResolvedRepo`.

    An explicit ``/tree/<branch>`` segment is used as-is without touching the
    network. Otherwise the configured default branches are probed in order.

    Raises:
        UnsupportedRepositoryError: the URL is not a GitHub repository URL
        BranchResolutionError: no guessed branch exists
        NetworkError: a probe failed to complete
    """
    owner, name, branch = parse_repository_url(repo_url)
    if not branch:
        guesses = CONFIG.network.branch_guesses
        branch = guess_default_branch(owner, name, client, guesses)
        if not branch:
            raise BranchResolutionError(repo_url, guesses)
        logger.debug("Guessed branch %s for %s", branch, repo_url)
    return ResolvedRepo(owner=owner, name=name, branch=branch)


__all__ = ["guess_default_branch", "parse_repository_url", "resolve_repository"]
