"""Tests for NoticeBuilder — titles, traces, custom data, degraded input."""

from __future__ import annotations

import time

from rollbar_notifier.core.config import NotifierConfig, ServerConfig
from rollbar_notifier.notice.builder import NoticeBuilder
from rollbar_notifier.notice.types import Severity


# ── Helpers ─────────────────────────────────────────────────────


def _config(**kw: object) -> NotifierConfig:
    defaults: dict[str, object] = {
        "access_token": "tok",
        "environment": "test",
        "platform": "linux",
        "framework": "aiohttp",
        "code_version": "abc123",
        "server": ServerConfig(host="web-1", root="/srv/app"),
    }
    defaults.update(kw)
    return NotifierConfig(**defaults)  # type: ignore[arg-type]


def _builder(**kw: object) -> NoticeBuilder:
    return NoticeBuilder(_config(**kw))


def _inner() -> None:
    raise ValueError("bad value")


def _outer() -> None:
    _inner()


class UnprintableError(Exception):
    def __str__(self) -> str:
        raise RuntimeError("boom")


def _raised() -> ValueError:
    try:
        _outer()
    except ValueError as exc:
        return exc
    raise AssertionError("unreachable")


# ── Exceptions ──────────────────────────────────────────────────


class TestBuildFromException:
    def test_level_matches_input(self) -> None:
        b = _builder()
        for severity in Severity:
            notice = b.build_from_exception(_raised(), level=severity)
            assert notice.level == severity.value

    def test_caller_title_used(self) -> None:
        notice = _builder().build_from_exception(_raised(), title="checkout failed")
        assert notice.title == "checkout failed"

    def test_title_derived_from_type_and_message(self) -> None:
        notice = _builder().build_from_exception(_raised())
        assert notice.title == "ValueError: bad value"

    def test_title_falls_back_to_type_name(self) -> None:
        notice = _builder().build_from_exception(KeyError())
        assert notice.title == "KeyError"

    def test_exception_info_captured(self) -> None:
        notice = _builder().build_from_exception(_raised())
        assert notice.body.trace is not None
        assert notice.body.message is None
        assert notice.body.trace.exception.class_name == "ValueError"
        assert notice.body.trace.exception.message == "bad value"

    def test_frames_outermost_first(self) -> None:
        notice = _builder().build_from_exception(_raised())
        assert notice.body.trace is not None
        methods = [f.method for f in notice.body.trace.frames]
        assert methods == ["_raised", "_outer", "_inner"]
        last = notice.body.trace.frames[-1]
        assert last.filename.endswith("test_builder.py")
        assert last.lineno is not None
        assert last.code == 'raise ValueError("bad value")'

    def test_unraised_exception_has_no_frames(self) -> None:
        notice = _builder().build_from_exception(RuntimeError("never raised"))
        assert notice.body.trace is not None
        assert notice.body.trace.frames == []
        assert notice.title == "RuntimeError: never raised"

    def test_unprintable_exception_still_builds(self) -> None:
        notice = _builder().build_from_exception(UnprintableError())
        assert notice.body.trace is not None
        assert notice.body.trace.exception.class_name == "UnprintableError"
        assert notice.body.trace.exception.message == ""
        assert notice.title == "UnprintableError"

    def test_unprintable_exception_keeps_caller_title(self) -> None:
        notice = _builder().build_from_exception(UnprintableError(), title="sync failed")
        assert notice.title == "sync failed"

    def test_none_error_gives_degraded_notice(self) -> None:
        notice = _builder().build_from_exception(None)
        assert notice.body.trace is not None
        assert notice.body.trace.frames == []
        assert notice.body.trace.exception.class_name == ""
        assert notice.title == ""
        assert notice.level == "error"

    def test_default_level_is_error(self) -> None:
        notice = _builder().build_from_exception(_raised())
        assert notice.level == "error"


# ── Messages ────────────────────────────────────────────────────


class TestBuildFromMessage:
    def test_message_body_and_level(self) -> None:
        notice = _builder().build_from_message("disk full", Severity.WARNING)
        assert notice.level == "warning"
        assert notice.body.message is not None
        assert notice.body.message.body == "disk full"
        assert notice.body.trace is None
        assert notice.title == "disk full"

    def test_custom_data_copied_verbatim(self) -> None:
        nested = {"inner": [1, 2, 3]}
        custom = {"volume": "/data", "free": 0, "nested": nested, "none": None}
        notice = _builder().build_from_message("disk full", "warning", custom)
        assert notice.custom == custom
        assert set(notice.custom) == set(custom)
        # Shallow copy: values are shared, the mapping is not.
        assert notice.custom["nested"] is nested
        custom["extra"] = 1
        assert "extra" not in notice.custom

    def test_no_custom_data_gives_empty_mapping(self) -> None:
        notice = _builder().build_from_message("hello")
        assert notice.custom == {}
        assert notice.level == "info"

    def test_none_message_degrades_to_empty(self) -> None:
        notice = _builder().build_from_message(None, "debug")
        assert notice.body.message is not None
        assert notice.body.message.body == ""
        assert notice.title == ""

    def test_unknown_level_kept_as_label(self) -> None:
        notice = _builder().build_from_message("hi", "fatal")
        assert notice.level == "fatal"

    def test_non_string_keys_stringified(self) -> None:
        notice = _builder().build_from_message("hi", "info", {1: "one"})  # type: ignore[dict-item]
        assert notice.custom == {"1": "one"}


# ── Stamped fields ──────────────────────────────────────────────


class TestStampedFields:
    def test_config_fields_applied(self) -> None:
        notice = _builder().build_from_message("hi")
        assert notice.environment == "test"
        assert notice.platform == "linux"
        assert notice.language == "python"
        assert notice.framework == "aiohttp"
        assert notice.code_version == "abc123"
        assert notice.server.host == "web-1"
        assert notice.server.root == "/srv/app"
        assert notice.notifier.name == "rollbar-notifier"

    def test_empty_framework_left_unset(self) -> None:
        notice = _builder(framework="", code_version="").build_from_message("hi")
        assert notice.framework is None
        assert notice.code_version is None

    def test_timestamp_is_current(self) -> None:
        before = int(time.time())
        notice = _builder().build_from_message("hi")
        assert before <= notice.timestamp <= int(time.time())

    def test_each_notice_unique(self) -> None:
        b = _builder()
        first = b.build_from_message("hi")
        second = b.build_from_message("hi")
        assert first.uuid != second.uuid
        assert first is not second
