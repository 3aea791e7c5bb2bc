from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from academy_metrics.main import load_document, main


PLAYER = {
    "id": "p1",
    "name": "Ada",
    "attributes": {"Attack": 8, "pace": 6},
    "performanceHistory": [
        {"date": "2024-03-01", "type": "training", "attributes": {"Attack": 7, "pace": 5}},
        {"date": "2024-03-08", "type": "match", "stats": {"goals": 1, "matchPoints": 6}},
    ],
}


@pytest.fixture(autouse=True)
def restore_root_handlers():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _write(path: Path, payload) -> str:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_profile_and_trend_output(tmp_path: Path, capsys) -> None:
    player = _write(tmp_path / "player.json", PLAYER)
    sessions = _write(
        tmp_path / "sessions.json",
        {"success": True, "data": [{"assignedPlayers": ["p1"], "attendance": {"p1": {"status": "Present"}}}]},
    )

    code = main(["--player", player, "--sessions", sessions, "--trend",
                 "--range", "daily", "--today", "2024-03-10"])
    out = capsys.readouterr().out

    assert code == 0
    assert "PLAYER PROFILE: Ada" in out
    assert "Sessions Attended:    1" in out
    assert "Goals / Assists / Clean Sheets: 1 / 0 / 0" in out
    assert "ATTRIBUTE GROWTH (daily, offset 0)" in out
    assert "2024-03-10" in out


def test_missing_player_prints_help(capsys) -> None:
    assert main([]) == 0
    assert "usage" in capsys.readouterr().out.lower()


def test_unreadable_input_returns_error(tmp_path: Path) -> None:
    assert main(["--player", str(tmp_path / "missing.json")]) == 1

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    assert main(["--player", str(bad)]) == 1

    not_object = _write(tmp_path / "list.json", [1, 2])
    assert main(["--player", not_object]) == 1


def test_bad_today_returns_error(tmp_path: Path) -> None:
    player = _write(tmp_path / "player.json", PLAYER)
    assert main(["--player", player, "--trend", "--today", "someday"]) == 1


def test_load_document_unwraps_api_envelope(tmp_path: Path) -> None:
    path = _write(tmp_path / "doc.json", {"success": True, "data": {"id": "p1"}})
    assert load_document(path) == {"id": "p1"}
