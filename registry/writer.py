"""Build the combined module registry and write it to disk."""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path

from config import CONFIG, BuildSettings
from registry.aggregator import aggregate_list
from registry.fetcher import FetchClient
from registry.models import ModuleCollection, ModuleRegistry
from utils.file_utils import write_text, write_text_atomic
from utils.http_client import HttpClient

logger = logging.getLogger(__name__)


def build_registry(
    plugins_list: str | Path,
    themes_list: str | Path,
    client: FetchClient,
    concurrency: int | None = None,
    now: datetime | None = None,
) -> ModuleRegistry:
    """
    Aggregate both repository lists and combine them into a registry.

    The plugins and themes lists are fetched concurrently with each other
    since they share no inputs or outputs. Either one failing fails the build.
    """
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="aggregate") as executor:
        plugins_future = executor.submit(aggregate_list, plugins_list, "plugins", client, concurrency)
        themes_future = executor.submit(aggregate_list, themes_list, "themes", client, concurrency)
        try:
            collections = [plugins_future.result(), themes_future.result()]
        except BaseException:
            plugins_future.cancel()
            themes_future.cancel()
            raise

    combined = ModuleCollection()
    for collection in collections:
        combined.merge(collection)

    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    return {
        "version": CONFIG.registry.format_version,
        "timestamp": timestamp,
        "plugins": combined.plugins,
        "themes": combined.themes,
    }


def serialize_registry(registry: ModuleRegistry) -> str:
    """Pretty-print the registry with 4-space indentation."""
    return json.dumps(registry, indent=4, ensure_ascii=False) + "\n"


def write_registry(registry: ModuleRegistry, path: str | Path, atomic: bool = True) -> None:
    """Overwrite ``path`` with the serialized registry."""
    payload = serialize_registry(registry)
    if atomic:
        write_text_atomic(path, payload)
    else:
        write_text(path, payload)
    logger.info(
        "Wrote %d plugins and %d themes to %s",
        len(registry["plugins"]),
        len(registry["themes"]),
        path,
    )


def build_and_write(settings: BuildSettings, client: FetchClient | None = None) -> ModuleRegistry:
    """Run a complete build; the output file is only touched once every fetch succeeded."""

    if client is not None:
        registry = build_registry(settings.plugins_list, settings.themes_list, client, settings.concurrency)
    else:
        with HttpClient(timeout=settings.timeout) as http_client:
            registry = build_registry(
                settings.plugins_list,
                settings.themes_list,
                http_client,
                settings.concurrency,
            )
    write_registry(registry, settings.output, atomic=settings.atomic_write)
    return registry


__all__ = ["build_and_write", "build_registry", "serialize_registry", "write_registry"]
