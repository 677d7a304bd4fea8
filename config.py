"""Application configuration and constants."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class NetworkConfig:
    """Configuration for outgoing HTTP requests."""

    # Per-request ceiling (seconds), applied to probes and fetches alike
    request_timeout: float = 30.0
    user_agent: str = "wcms-modules-builder"

    # Default branches tried, in order, when a repository URL has none
    branch_guesses: tuple[str, ...] = ("master", "main")


@dataclass(frozen=True)
class RegistryConfig:
    """Configuration for the manifest format and legacy convention files."""

    format_version: int = 1
    manifest_filename: str = "wcms-modules.json"
    summary_filename: str = "summary"
    version_filename: str = "version"
    preview_candidates: tuple[str, ...] = ("preview.png", "preview.jpg")


@dataclass(frozen=True)
class BuildConfig:
    """Configuration for a registry build run."""

    plugins_list: str = "plugins-list.json"
    themes_list: str = "themes-list.json"
    output: str = "wcms-modules.json"

    # Fetches in flight per list; 1 keeps us under GitHub's anonymous rate limit
    concurrency_limit: int = 1
    max_concurrency_limit: int = 8
    min_concurrency_limit: int = 1

    atomic_write: bool = True


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""

    network: NetworkConfig = NetworkConfig()
    registry: RegistryConfig = RegistryConfig()
    build: BuildConfig = BuildConfig()


# Global configuration instance
CONFIG = AppConfig()


@dataclass
class BuildSettings:
    """Per-run options, defaulting to ``CONFIG``."""

    plugins_list: Path = field(default_factory=lambda: Path(CONFIG.build.plugins_list))
    themes_list: Path = field(default_factory=lambda: Path(CONFIG.build.themes_list))
    output: Path = field(default_factory=lambda: Path(CONFIG.build.output))
    concurrency: int = CONFIG.build.concurrency_limit
    timeout: float = CONFIG.network.request_timeout
    atomic_write: bool = CONFIG.build.atomic_write

    def __post_init__(self) -> None:
        self.plugins_list = Path(self.plugins_list)
        self.themes_list = Path(self.themes_list)
        self.output = Path(self.output)
        self.concurrency = clamp_concurrency(self.concurrency)
        if self.timeout <= 0:
            raise ValueError(f"Request timeout must be positive, got {self.timeout}")


def clamp_concurrency(value: int) -> int:
    """Clamp a requested concurrency limit to the supported range."""
    return max(CONFIG.build.min_concurrency_limit, min(int(value), CONFIG.build.max_concurrency_limit))
