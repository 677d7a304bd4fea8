"""Aggregate metadata for every repository listed in a repository list file."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from config import CONFIG, clamp_concurrency
from registry.fetcher import FetchClient, fetch_metadata
from registry.models import MODULE_TYPES, ModuleCollection, ModuleType, RepoMetadata
from utils.file_utils import read_lines

logger = logging.getLogger(__name__)

_CATEGORY_LABELS: dict[str, str] = {"plugins": "Plugin", "themes": "Theme"}


def read_repository_list(path: str | Path) -> list[str]:
    """Return the repository URLs listed in ``path``, one per non-blank line."""
    return read_lines(path)


def aggregate_repositories(
    repo_urls: Sequence[str],
    module_type: ModuleType,
    client: FetchClient,
    concurrency: int | None = None,
) -> ModuleCollection:
    """
    Fetch metadata for ``repo_urls`` and merge it into one collection.

    At most ``concurrency`` fetches are in flight at once. The default of 1
    fetches strictly one repository after another, which keeps anonymous
    GitHub traffic under its rate limit. Results are merged in list order, so
    a directory name listed twice keeps the later repository's entry.

    The first failing repository aborts the whole list.
    """
    limit = clamp_concurrency(concurrency if concurrency is not None else CONFIG.build.concurrency_limit)
    aggregated = ModuleCollection()
    if not repo_urls:
        return aggregated

    pending_urls = deque(repo_urls)
    in_flight: deque[Future[RepoMetadata]] = deque()
    executor = ThreadPoolExecutor(max_workers=limit, thread_name_prefix=f"fetch-{module_type}")
    try:
        while pending_urls or in_flight:
            # Never more than ``limit`` submitted, so nothing starts after a failure
            while pending_urls and len(in_flight) < limit:
                in_flight.append(executor.submit(fetch_metadata, pending_urls.popleft(), module_type, client))
            repo_meta = in_flight.popleft().result()
            collection = repo_meta.as_collection()
            log_collection(repo_meta.repo_url, collection)
            aggregated.merge(collection)
    except BaseException:
        for fut in in_flight:
            fut.cancel()
        raise
    finally:
        executor.shutdown(wait=True)
    return aggregated


def aggregate_list(
    path: str | Path,
    module_type: ModuleType,
    client: FetchClient,
    concurrency: int | None = None,
) -> ModuleCollection:
    """Read the repository list at ``path`` and aggregate its metadata."""
    repo_urls = read_repository_list(path)
    logger.info("Fetching %d %s repositories from %s", len(repo_urls), module_type, path)
    return aggregate_repositories(repo_urls, module_type, client, concurrency)


def log_collection(repo_url: str, collection: ModuleCollection) -> None:
    logger.info("Metadata from %s:", repo_url)
    for module_type in MODULE_TYPES:
        label = _CATEGORY_LABELS[module_type]
        for directory, module in collection.category(module_type).items():
            logger.info(" - %s %s @ v%s", label, directory, module.get("version"))


__all__ = ["aggregate_list", "aggregate_repositories", "read_repository_list"]
