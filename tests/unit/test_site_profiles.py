"""Unit tests for the site profile registry and config loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.config.loader import load_config
from src.config.settings import Settings
from src.config.site_profiles import BUILTIN_PROFILES, build_registry, resolve_targets
from src.utils.errors import ConfigurationError, PipelineError
from src.utils.run_lock import run_lock

REPO_CONFIG = Path(__file__).resolve().parents[2] / "config" / "config.yaml"

YAML_CONFIG = """\
app:
  name: lineup-sync
sites:
  - id: summerfest
    festival_id: festival-summer
    name: Summer Fest
    year: 2026
    start_date: 2026-07-02
    index_urls: ["https://summer.example/lineup/"]
    base_url: https://summer.example
    link_selector: a.artist
    link_allow_pattern: "/bands/[a-z0-9-]+/?$"
    selectors:
      name: h1
      day: .day
    text_parser: show_day_block
"""

SUMMERFEST_SITE = {
    "id": "summerfest",
    "festival_id": "festival-summer",
    "name": "Summer Fest",
    "year": 2026,
    "index_urls": ["https://summer.example/lineup/"],
    "base_url": "https://summer.example",
    "link_selector": "a.artist",
    "selectors": {"name": "h1"},
}


class TestBuildRegistry:
    def test_builtins_present(self) -> None:
        registry = build_registry()
        assert set(registry) == {profile.id for profile in BUILTIN_PROFILES}
        assert registry["novarock"].start_date is not None
        assert registry["rfp"].start_date is None

    def test_yaml_sites_are_added(self, tmp_path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(YAML_CONFIG, encoding="utf-8")

        registry = build_registry(load_config(str(path), Settings(_env_file=None)))

        profile = registry["summerfest"]
        assert profile.festival_id == "festival-summer"
        assert profile.link_allow_pattern.search("https://summer.example/bands/abc/")
        assert profile.selectors.stage is None
        assert "rfp" in registry

    def test_yaml_entry_replaces_builtin(self) -> None:
        raw = BUILTIN_PROFILES[0].model_dump(mode="json")
        raw["link_allow_pattern"] = BUILTIN_PROFILES[0].link_allow_pattern.pattern
        raw["link_deny_pattern"] = BUILTIN_PROFILES[0].link_deny_pattern.pattern
        raw["name"] = "Renamed"

        registry = build_registry({"sites": [raw]})

        assert registry[raw["id"]].name == "Renamed"

    def test_unknown_text_parser(self) -> None:
        raw = {
            "id": "bad",
            "festival_id": "f",
            "name": "Bad",
            "year": 2026,
            "index_urls": ["https://bad.example/"],
            "base_url": "https://bad.example",
            "link_selector": "a",
            "selectors": {"name": "h1"},
            "text_parser": "klingon",
        }
        with pytest.raises(ConfigurationError, match="unknown text parser 'klingon'"):
            build_registry({"sites": [raw]})

    def test_invalid_site_entry(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid site profile 'broken'"):
            build_registry({"sites": [{"id": "broken"}]})


class TestResolveTargets:
    def test_all(self) -> None:
        registry = build_registry()
        assert [p.id for p in resolve_targets(registry, "all")] == list(registry)

    def test_single_is_case_insensitive(self) -> None:
        assert [p.id for p in resolve_targets(build_registry(), " NovaRock ")] == ["novarock"]

    @pytest.mark.parametrize("festival", ["summerfest", "SummerFest", "SUMMERFEST"])
    def test_mixed_case_yaml_id_is_selectable(self, festival) -> None:
        registry = build_registry(
            {"sites": [{**SUMMERFEST_SITE, "id": "SummerFest"}]}
        )

        assert [p.id for p in resolve_targets(registry, festival)] == ["SummerFest"]

    def test_unknown(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown festival 'wacken'"):
            resolve_targets(build_registry(), "wacken")


class TestLoadConfig:
    def test_missing_file_is_empty_plus_env(self, tmp_path) -> None:
        settings = Settings(_env_file=None, app_env="staging", spotify_client_id="x")
        config = load_config(str(tmp_path / "nope.yaml"), settings)

        assert config == {"app": {"env": "staging"}, "catalog": {"configured": False}}

    def test_env_overrides_merge_into_yaml(self, tmp_path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("app:\n  name: lineup-sync\n  env: yaml\n", encoding="utf-8")

        config = load_config(str(path), Settings(_env_file=None, app_env="production"))

        assert config["app"] == {"name": "lineup-sync", "env": "production"}

    def test_storage_and_logging_come_from_settings_only(self) -> None:
        config = load_config(str(REPO_CONFIG), Settings(_env_file=None))

        assert "storage" not in config
        assert "logging" not in config
        assert config["sites"] == []


class TestRunLock:
    def test_lock_released_after_block(self, tmp_path) -> None:
        lock = tmp_path / "scrape" / ".sync.lock"
        with run_lock(lock) as held:
            assert held.exists()
        assert not lock.exists()

    def test_second_holder_fails_fast(self, tmp_path) -> None:
        lock = tmp_path / ".sync.lock"
        with run_lock(lock):
            with pytest.raises(PipelineError, match="Another sync run"):
                with run_lock(lock):
                    pass
        assert not lock.exists()
