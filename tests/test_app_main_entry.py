from __future__ import annotations

import json
import runpy
from pathlib import Path

import gamesense_app.__main__ as app_main
from gamesense_app import cli


def test_main_defaults_to_doctor(monkeypatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(app_main, "_cli_main", lambda argv=None: calls.append(list(argv or [])) or 0)

    rc = app_main.main([])
    assert rc == 0
    assert calls == [["doctor"]]


def test_main_passes_through_args(monkeypatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(app_main, "_cli_main", lambda argv=None: calls.append(list(argv or [])) or 0)

    rc = app_main.main(["send", "--event", "HEALTH", "--value", "3"])
    assert rc == 0
    assert calls == [["send", "--event", "HEALTH", "--value", "3"]]


def test_main_module_runpath_without_package_context() -> None:
    main_path = Path(__file__).resolve().parents[1] / "apps" / "cli" / "gamesense_app" / "__main__.py"
    result = runpy.run_path(str(main_path))
    assert "main" in result


def _isolate_config(monkeypatch, tmp_path: Path) -> None:
    import gamesense_core.config as config
    import gamesense_core.logging_setup as logging_setup

    monkeypatch.setattr(config, "config_root", lambda: tmp_path)
    monkeypatch.setattr(logging_setup, "config_root", lambda: tmp_path)


def test_draw_writes_preview_without_sending(monkeypatch, tmp_path, capsys) -> None:
    _isolate_config(monkeypatch, tmp_path)
    preview = tmp_path / "preview.png"

    rc = cli.main(["draw", "--rect", "10,10,20,10", "--preview", str(preview), "--scale", "2", "--no-send"])
    assert rc == 0

    out = json.loads(capsys.readouterr().out)
    assert out["size"] == "128x40"
    assert out["bytes"] == 640
    assert out["lit_pixels"] == 200
    assert out["sent"] is False
    assert preview.exists()


def test_draw_out_of_range_reports_error(monkeypatch, tmp_path, capsys) -> None:
    _isolate_config(monkeypatch, tmp_path)

    rc = cli.main(["draw", "--pixel", "128,0", "--no-send"])
    assert rc == 1

    out = json.loads(capsys.readouterr().out)
    assert out["success"] is False
    assert out["type"] == "OutOfRangeError"


def test_send_posts_event(monkeypatch, tmp_path, capsys) -> None:
    _isolate_config(monkeypatch, tmp_path)
    monkeypatch.setenv("GAMESENSE_ADDRESS", "127.0.0.1:51248")
    posted: list[tuple[str, dict]] = []

    from gamesense_client import GameSenseClient

    monkeypatch.setattr(GameSenseClient, "post", lambda self, path, data: posted.append((path, data)))

    rc = cli.main(["send", "--event", "HEALTH", "--value", "9"])
    assert rc == 0
    assert posted == [("/game_event", {"game": "GAMESENSE_PY", "event": "HEALTH", "data": {"value": 9}})]
    assert json.loads(capsys.readouterr().out)["value"] == 9


def test_send_rejects_lowercase_event_id(monkeypatch, tmp_path, capsys) -> None:
    _isolate_config(monkeypatch, tmp_path)
    monkeypatch.setenv("GAMESENSE_ADDRESS", "127.0.0.1:51248")

    rc = cli.main(["send", "--event", "health", "--value", "1"])
    assert rc == 1

    out = json.loads(capsys.readouterr().out)
    assert out["success"] is False
    assert out["type"] == "ValueError"
    assert "health" in out["error"]


def test_send_rejects_malformed_frame(monkeypatch, tmp_path, capsys) -> None:
    _isolate_config(monkeypatch, tmp_path)
    monkeypatch.setenv("GAMESENSE_ADDRESS", "127.0.0.1:51248")
    posted: list[str] = []

    from gamesense_client import GameSenseClient

    monkeypatch.setattr(GameSenseClient, "post", lambda self, path, data: posted.append(path))

    rc = cli.main(["send", "--event", "HEALTH", "--value", "1", "--frame", "{nope"])
    assert rc == 1
    assert posted == []

    out = json.loads(capsys.readouterr().out)
    assert out["success"] is False
    assert out["type"] == "JSONDecodeError"
