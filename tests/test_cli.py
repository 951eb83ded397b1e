"""Tests for the command-line interface."""

import json
from pathlib import Path

import pytest

from prayer_circle.cli import create_parser, main


def write_store(path: Path) -> None:
    """Store with one overdue and one future open prayer."""

    def prayer(title: str, end: str) -> dict:
        return {
            "title": title,
            "description": "",
            "endDateTime": {"$date": end},
            "prayerAccess": "public",
            "creatorId": "alice",
            "participants": {"users": [], "groups": []},
            "prayerType": "visible",
            "isOpen": True,
            "impressionCount": 0,
        }

    data = {
        "prayers": {
            "overdue": prayer("Geçmiş", "2000-01-01T00:00:00+00:00"),
            "future": prayer("Gelecek", "2099-01-01T00:00:00+00:00"),
        }
    }
    path.write_text(json.dumps(data), encoding="utf-8")


class TestCLI:
    """CLI tests."""

    def test_serve_options_optional(self) -> None:
        """Test serve parses without options so config can fill them."""
        args = create_parser().parse_args(["serve"])
        assert args.host is None
        assert args.port is None
        assert args.no_recover is False

    def test_close_overdue(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test only the expired prayer is closed and persisted."""
        path = tmp_path / "prayers.json"
        write_store(path)

        assert main(["close-overdue", "--store", str(path)]) == 0
        assert "1 dua kapatıldı" in capsys.readouterr().out

        prayers = json.loads(path.read_text(encoding="utf-8"))["prayers"]
        assert prayers["overdue"]["isOpen"] is False
        assert prayers["future"]["isOpen"] is True

    def test_list(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test prayers are printed as a table."""
        path = tmp_path / "prayers.json"
        write_store(path)

        assert main(["list", "--store", str(path)]) == 0
        out = capsys.readouterr().out
        assert "Geçmiş" in out
        assert "Toplam: 2" in out
