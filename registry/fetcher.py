"""Fetch module metadata from a repository manifest or legacy convention files."""

from __future__ import annotations

import json
import logging
import re
from typing import Protocol

from config import CONFIG
from registry.errors import ManifestFormatError, ManifestVersionError
from registry.models import (
    MODULE_TYPES,
    LegacyMetadata,
    ManifestMetadata,
    ModuleMetadata,
    ModuleType,
    RepoMetadata,
    ResolvedRepo,
)
from registry.resolver import resolve_repository

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[-_]")
_WORD_START = re.compile(r"(^| )[a-z]")


class FetchClient(Protocol):
    def exists(self, url: str) -> bool: ...

    def get_bytes(self, url: str) -> bytes: ...


def humanize_name(slug: str) -> str:
    """Turn a repository slug into a display name (``my-cool_theme`` -> ``My Cool Theme``)."""
    return _WORD_START.sub(lambda match: match.group(0).upper(), _SEPARATORS.sub(" ", slug))


def fetch_metadata(repo_url: str, module_type: ModuleType, client: FetchClient) -> RepoMetadata:
    """
    Fetch the metadata published by the repository at ``repo_url``.

    A ``wcms-modules.json`` manifest at the repository root is used verbatim.
    Without one, metadata is synthesized from the legacy ``summary``,
    ``version`` and ``preview.*`` files and filed under ``module_type``.
    """
    repo = resolve_repository(repo_url, client)

    manifest_url = repo.raw_url(CONFIG.registry.manifest_filename)
    if client.exists(manifest_url):
        return ManifestMetadata(repo_url=repo_url, manifest=load_manifest(repo_url, client.get_bytes(manifest_url)))

    logger.debug("No manifest for %s, falling back to legacy files", repo_url)
    return LegacyMetadata(
        repo_url=repo_url,
        module_type=module_type,
        directory=repo.name,
        module=build_legacy_metadata(repo, client),
    )


def load_manifest(repo_url: str, payload: bytes) -> dict:
    """Parse a manifest payload and check its format version."""

    try:
        manifest = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ManifestFormatError(repo_url, str(exc)) from exc
    if not isinstance(manifest, dict):
        raise ManifestFormatError(repo_url, f"expected an object, got {type(manifest).__name__}")

    version = manifest.get("version")
    # Neither ``true`` nor ``1.0`` is version 1
    if type(version) is not int or version != CONFIG.registry.format_version:
        raise ManifestVersionError(repo_url, version)

    for module_type in MODULE_TYPES:
        section = manifest.get(module_type)
        if section is None:
            continue
        if not isinstance(section, dict):
            raise ManifestFormatError(repo_url, f'"{module_type}" must be an object')
        for key, entry in section.items():
            if not isinstance(entry, dict):
                raise ManifestFormatError(repo_url, f'"{module_type}.{key}" must be an object')
    return manifest


def build_legacy_metadata(repo: ResolvedRepo, client: FetchClient) -> ModuleMetadata:
    """Synthesize module metadata from the legacy file-per-field layout."""

    registry_config = CONFIG.registry
    metadata: ModuleMetadata = {
        "name": humanize_name(repo.name),
        "repo": repo.html_url,
        "zip": repo.zip_url,
        "summary": _fetch_stripped(repo.raw_url(registry_config.summary_filename), client),
        "version": _fetch_stripped(repo.raw_url(registry_config.version_filename), client),
    }

    for candidate in registry_config.preview_candidates:
        image_url = repo.raw_url(candidate)
        if client.exists(image_url):
            metadata["image"] = image_url
            break
    return metadata


def _fetch_stripped(url: str, client: FetchClient) -> str:
    return client.get_bytes(url).decode("utf-8", errors="replace").strip()


__all__ = ["build_legacy_metadata", "fetch_metadata", "humanize_name", "load_manifest"]
