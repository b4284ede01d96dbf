"""Tests for config loading and palette selection."""

from __future__ import annotations

import json
import logging

from typespeed_tui import DEFAULT_THEME, THEMES, load_config, resolve_palette


class TestLoadConfig:
    def test_missing_file(self, tmp_path):
        assert load_config(tmp_path / "nope.json") == {}

    def test_valid_file(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"theme": "mint"}), encoding="utf-8")
        assert load_config(path) == {"theme": "mint"}

    def test_corrupt_file_warns(self, tmp_path, caplog):
        path = tmp_path / "cfg.json"
        path.write_text("{not json", encoding="utf-8")
        with caplog.at_level(logging.WARNING):
            assert load_config(path) == {}
        assert "Could not load config" in caplog.text

    def test_non_object_ignored(self, tmp_path, caplog):
        path = tmp_path / "cfg.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with caplog.at_level(logging.WARNING):
            assert load_config(path) == {}
        assert "expected a JSON object" in caplog.text


class TestResolvePalette:
    def test_default(self):
        assert resolve_palette({}) == (DEFAULT_THEME, THEMES[DEFAULT_THEME])

    def test_builtin(self):
        assert resolve_palette({"theme": "ember"}) == ("ember", THEMES["ember"])

    def test_unknown_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING):
            name, _ = resolve_palette({"theme": "neon"})
        assert name == DEFAULT_THEME
        assert "Unknown theme" in caplog.text

    def test_custom_theme_merged_over_default(self):
        name, palette = resolve_palette({"theme": "mine", "themes": {"mine": {"ok": "#00ff00"}}})
        assert name == "mine"
        assert palette["ok"] == "#00ff00"
        assert palette["bad"] == THEMES[DEFAULT_THEME]["bad"]

    def test_builtins_not_mutated(self):
        resolve_palette({"themes": {"slate": {"ok": "#000000"}}})
        assert THEMES["slate"]["ok"] != "#000000"
