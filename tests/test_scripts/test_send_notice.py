"""Tests for scripts/send_notice.py — argument handling and wiring."""

from __future__ import annotations

import argparse
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml

from rollbar_notifier.delivery.types import PendingSend
from scripts.send_notice import _parse_custom, run


def _args(tmp_path: Path, **kw: object) -> argparse.Namespace:
    config_file = tmp_path / "settings.yaml"
    config_file.write_text(yaml.dump({"notifier": {"access_token": "tok"}}))
    defaults: dict[str, object] = {
        "message": "disk full",
        "config": str(config_file),
        "level": "warning",
        "custom": ["volume=/data"],
        "timeout": 1.0,
        "log_level": None,
    }
    defaults.update(kw)
    return argparse.Namespace(**defaults)


class TestParseCustom:
    def test_pairs(self) -> None:
        assert _parse_custom(["a=1", "b=x=y"]) == {"a": "1", "b": "x=y"}

    def test_empty(self) -> None:
        assert _parse_custom([]) == {}

    def test_missing_separator(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            _parse_custom(["novalue"])


class TestRun:
    def test_sends_one_message(self, tmp_path: Path) -> None:
        notifier = MagicMock()
        notifier.__enter__ = MagicMock(return_value=notifier)
        notifier.__exit__ = MagicMock(return_value=False)
        notifier.send_message = MagicMock(return_value=PendingSend())

        with patch("scripts.send_notice.create_notifier", return_value=notifier), \
                patch("scripts.send_notice.setup_logging"):
            code = run(_args(tmp_path))

        assert code == 0
        notifier.send_message.assert_called_once_with(
            "disk full", "warning", {"volume": "/data"}
        )
        notifier.flush.assert_called_once_with(1.0)

    def test_bad_custom_exits_2(self, tmp_path: Path) -> None:
        with patch("scripts.send_notice.create_notifier") as factory, \
                patch("scripts.send_notice.setup_logging"):
            code = run(_args(tmp_path, custom=["broken"]))
        assert code == 2
        factory.assert_not_called()
