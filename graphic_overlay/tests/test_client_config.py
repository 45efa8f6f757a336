from __future__ import annotations

import json
from pathlib import Path

from graphic_overlay.client_config import (
    CLIENT_LOG_RETENTION_MAX,
    OverlaySettings,
    load_overlay_settings,
)
from graphic_overlay.debug_config import DebugConfig, is_dev_mode, load_debug_config


def test_missing_settings_file_returns_defaults(tmp_path: Path) -> None:
    assert load_overlay_settings(tmp_path / "absent.json") == OverlaySettings()
    assert load_overlay_settings(None) == OverlaySettings()


def test_malformed_settings_return_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_overlay_settings(path) == OverlaySettings()

    path.write_text("[1, 2, 3]", encoding="utf-8")
    assert load_overlay_settings(path) == OverlaySettings()


def test_undecodable_settings_file_returns_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_bytes(b"\xff\xfe\x00garbage")

    assert load_overlay_settings(path) == OverlaySettings()


def test_settings_values_are_loaded_and_clamped(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "guide": {"enabled": False, "color": "#00FFFF", "line_width": 0},
                "annotation_line_width": "3",
                "label_color": "  yellow ",
                "client_log_retention": 99,
            }
        ),
        encoding="utf-8",
    )

    settings = load_overlay_settings(path)

    assert settings.guide_oval_enabled is False
    assert settings.guide_color == "#00FFFF"
    assert settings.guide_line_width == 1
    assert settings.annotation_line_width == 3
    assert settings.label_color == "yellow"
    assert settings.client_log_retention == CLIENT_LOG_RETENTION_MAX


def test_bad_setting_values_fall_back_individually(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"guide": "red", "annotation_line_width": "wide", "label_color": 7, "client_log_retention": True}),
        encoding="utf-8",
    )

    settings = load_overlay_settings(path)

    assert settings == OverlaySettings()


def test_dev_mode_tokens() -> None:
    assert is_dev_mode("1") is True
    assert is_dev_mode(" Yes ") is True
    assert is_dev_mode("off") is False
    assert is_dev_mode("") is False


def test_dev_mode_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("GRAPHIC_OVERLAY_DEV_MODE", "true")
    assert is_dev_mode() is True
    monkeypatch.delenv("GRAPHIC_OVERLAY_DEV_MODE")
    assert is_dev_mode() is False


def test_debug_config_ignored_outside_dev_mode(tmp_path: Path) -> None:
    path = tmp_path / "debug.json"
    path.write_text(json.dumps({"trace_render": True, "surface_outline": True}), encoding="utf-8")

    assert load_debug_config(path, enabled=False) == DebugConfig()


def test_debug_config_loaded_in_dev_mode(tmp_path: Path) -> None:
    path = tmp_path / "debug.json"
    path.write_text(
        json.dumps({"tracing": {"enabled": True}, "surface_outline": True, "log_draw_failures": False}),
        encoding="utf-8",
    )

    config = load_debug_config(path, enabled=True)

    assert config == DebugConfig(trace_render=True, surface_outline=True, log_draw_failures=False)


def test_debug_config_missing_file_in_dev_mode(tmp_path: Path) -> None:
    assert load_debug_config(tmp_path / "debug.json", enabled=True) == DebugConfig()


def test_debug_config_undecodable_file_in_dev_mode(tmp_path: Path) -> None:
    path = tmp_path / "debug.json"
    path.write_bytes(b"\xff\xfe\x00garbage")

    assert load_debug_config(path, enabled=True) == DebugConfig()
