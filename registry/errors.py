"""Exceptions raised while building the module registry.

Every error here is fatal for the run: nothing retries, and the registry file
is only written once both lists have been fetched without a single failure.
"""

from __future__ import annotations

from typing import Any


class RegistryBuildError(RuntimeError):
    """Base class for all registry build failures."""


class UnsupportedRepositoryError(RegistryBuildError, ValueError):
    """Raised when a repository URL does not point at a GitHub repository."""

    def __init__(self, repo_url: str) -> None:
        super().__init__(f"Unsupported Git repo {repo_url}")
        self.repo_url = repo_url


class BranchResolutionError(RegistryBuildError):
    """Raised when none of the guessed default branches exist."""

    def __init__(self, repo_url: str, guesses: tuple[str, ...] = ()) -> None:
        tried = f" (tried {', '.join(guesses)})" if guesses else ""
        super().__init__(f"Could not determine default GitHub branch for {repo_url}{tried}")
        self.repo_url = repo_url
        self.guesses = guesses


class NetworkError(RegistryBuildError):
    """Raised on timeouts, connection failures and non-2xx responses."""

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        super().__init__(f"Request to {url} failed: {reason}")
        self.url = url
        self.reason = reason
        self.status_code = status_code


class ManifestVersionError(RegistryBuildError):
    """Raised when a repository manifest declares an unsupported format version."""

    def __init__(self, repo_url: str, version: Any) -> None:
        super().__init__(f"{repo_url} has an invalid metadata version {version!r}")
        self.repo_url = repo_url
        self.version = version


class ManifestFormatError(RegistryBuildError):
    """Raised when a repository manifest is not a JSON object."""

    def __init__(self, repo_url: str, detail: str) -> None:
        super().__init__(f"{repo_url} has a malformed manifest: {detail}")
        self.repo_url = repo_url


__all__ = [
    "BranchResolutionError",
    "ManifestFormatError",
    "ManifestVersionError",
    "NetworkError",
    "RegistryBuildError",
    "UnsupportedRepositoryError",
]
