"""Data structures shared by the registry build pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, NotRequired, TypedDict, Union

ModuleType = Literal["plugins", "themes"]
MODULE_TYPES: tuple[ModuleType, ...] = ("plugins", "themes")


class ModuleMetadata(TypedDict):
    """Metadata describing one plugin or theme in the registry."""

    name: str
    version: str
    summary: str
    image: NotRequired[str]
    zip: str
    repo: str


class ModuleRegistry(TypedDict):
    """Top-level shape of the generated ``wcms-modules.json`` file."""

    version: int
    timestamp: str
    plugins: dict[str, ModuleMetadata]
    themes: dict[str, ModuleMetadata]


@dataclass(frozen=True, slots=True)
class ResolvedRepo:
    """URLs derived from a GitHub repository reference, all on the same branch."""

    owner: str
    name: str
    branch: str

    @property
    def raw_prefix(self) -> str:
        return f"https://raw.githubusercontent.com/{self.owner}/{self.name}/{self.branch}"

    @property
    def zip_url(self) -> str:
        return f"https://github.com/{self.owner}/{self.name}/archive/{self.branch}.zip"

    @property
    def html_url(self) -> str:
        return f"https://github.com/{self.owner}/{self.name}/tree/{self.branch}"

    def raw_url(self, filename: str) -> str:
        """Return the raw-content URL of a file at the repository root."""
        return f"{self.raw_prefix}/{filename}"


@dataclass(slots=True)
class ModuleCollection:
    """Modules grouped by category, keyed by directory name."""

    plugins: dict[str, ModuleMetadata] = field(default_factory=dict)
    themes: dict[str, ModuleMetadata] = field(default_factory=dict)

    def category(self, module_type: ModuleType) -> dict[str, ModuleMetadata]:
        if module_type == "plugins":
            return self.plugins
        if module_type == "themes":
            return self.themes
        raise ValueError(f"Unknown module type: {module_type}")

    def merge(self, other: ModuleCollection) -> None:
        """Merge ``other`` into this collection; its entries win on duplicate keys."""
        self.plugins.update(other.plugins)
        self.themes.update(other.themes)

    def __len__(self) -> int:
        return len(self.plugins) + len(self.themes)


@dataclass(frozen=True, slots=True)
class ManifestMetadata:
    """A ready-made manifest fetched from the repository, used verbatim."""

    repo_url: str
    manifest: dict[str, Any]

    def as_collection(self) -> ModuleCollection:
        return ModuleCollection(
            plugins=dict(self.manifest.get("plugins") or {}),
            themes=dict(self.manifest.get("themes") or {}),
        )


@dataclass(frozen=True, slots=True)
class LegacyMetadata:
    """Metadata synthesized from the legacy ``summary``/``version``/``preview.*`` files."""

    repo_url: str
    module_type: ModuleType
    directory: str
    module: ModuleMetadata

    def as_collection(self) -> ModuleCollection:
        collection = ModuleCollection()
        collection.category(self.module_type)[self.directory] = self.module
        return collection


RepoMetadata = Union[ManifestMetadata, LegacyMetadata]


__all__ = [
    "LegacyMetadata",
    "MODULE_TYPES",
    "ManifestMetadata",
    "ModuleCollection",
    "ModuleMetadata",
    "ModuleRegistry",
    "ModuleType",
    "RepoMetadata",
    "ResolvedRepo",
]
