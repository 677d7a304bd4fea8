"""Tests for configuration defaults and per-run settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from config import CONFIG, BuildSettings, clamp_concurrency


def test_defaults_match_registry_contract() -> None:
    assert CONFIG.network.request_timeout == 30
    assert CONFIG.network.branch_guesses == ("master", "main")
    assert CONFIG.registry.format_version == 1
    assert CONFIG.registry.preview_candidates == ("preview.png", "preview.jpg")
    assert CONFIG.build.concurrency_limit == 1


def test_build_settings_coerce_paths() -> None:
    settings = BuildSettings(plugins_list="p.txt", themes_list="t.txt", output="out.json")  # type: ignore[arg-type]

    assert settings.plugins_list == Path("p.txt")
    assert settings.output == Path("out.json")
    assert settings.concurrency == 1
    assert settings.atomic_write is True


@pytest.mark.parametrize(("requested", "expected"), [(0, 1), (-3, 1), (4, 4), (100, CONFIG.build.max_concurrency_limit)])
def test_clamp_concurrency(requested: int, expected: int) -> None:
    assert clamp_concurrency(requested) == expected


def test_build_settings_reject_non_positive_timeout() -> None:
    with pytest.raises(ValueError, match="timeout"):
        BuildSettings(timeout=0)
