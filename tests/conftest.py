"""Shared fixtures: an in-memory stand-in for GitHub."""

from __future__ import annotations

import json
import threading
from typing import Any

import pytest

from registry.errors import NetworkError


class FakeGitHub:
    """Serves HEAD probes and GET fetches from dictionaries."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.existing: set[str] = set()
        self.failing: set[str] = set()
        self.calls: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    # --- helpers used by tests ---
    def add_branch(self, owner: str, name: str, branch: str = "master") -> None:
        self.existing.add(f"https://github.com/{owner}/{name}/tree/{branch}")

    def add_file(self, url: str, content: str | bytes | dict[str, Any]) -> None:
        if isinstance(content, dict):
            content = json.dumps(content)
        self.files[url] = content.encode("utf-8") if isinstance(content, str) else content

    def add_legacy_repo(
        self,
        owner: str,
        name: str,
        version: str = "1.0.0",
        summary: str = "A module.",
        branch: str = "master",
        preview: str | None = None,
    ) -> None:
        self.add_branch(owner, name, branch)
        prefix = f"https://raw.githubusercontent.com/{owner}/{name}/{branch}"
        self.add_file(f"{prefix}/summary", f"  {summary}\n")
        self.add_file(f"{prefix}/version", f"{version}\n")
        if preview:
            self.add_file(f"{prefix}/{preview}", b"\x89PNG")

    def add_manifest_repo(self, owner: str, name: str, manifest: dict[str, Any], branch: str = "master") -> None:
        self.add_branch(owner, name, branch)
        self.add_file(f"https://raw.githubusercontent.com/{owner}/{name}/{branch}/wcms-modules.json", manifest)

    # --- client interface ---
    def exists(self, url: str) -> bool:
        with self._lock:
            self.calls.append(("HEAD", url))
        if url in self.failing:
            raise NetworkError(url, "connection reset")
        return url in self.existing or url in self.files

    def get_bytes(self, url: str) -> bytes:
        with self._lock:
            self.calls.append(("GET", url))
        if url in self.failing or url not in self.files:
            raise NetworkError(url, "HTTP status code 404", 404)
        return self.files[url]

    def urls(self, method: str | None = None) -> list[str]:
        return [url for verb, url in self.calls if method is None or verb == method]


@pytest.fixture
def github() -> FakeGitHub:
    return FakeGitHub()
