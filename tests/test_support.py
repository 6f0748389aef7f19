"""
Tests for the pieces around the diff engine:
    §1  Emptiness predicates
    §2  Format helpers
    §3  Configuration
    §4  Logging
"""

import copy
import datetime
import json
import math
import os
import sys

import pytest
import structlog
from structlog.testing import capture_logs

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from recdiff.config import DiffConfig, configure, load_config
from recdiff.core import ByIdentity, Change, compare, reconcile
from recdiff.formats import (
    change_to_python, changes_to_python, clone, format_path, from_json,
    result_to_python,
)
from recdiff.logging import get_logger, setup_logging
from recdiff.validation import MISSING, ValidationError, is_non_empty, require_non_empty


# ═══════════════════════════════════════════════════════════════════
#  §1  EMPTINESS PREDICATES
# ═══════════════════════════════════════════════════════════════════

class TestIsNonEmpty:

    @pytest.mark.parametrize("value", [None, MISSING])
    def test_absent_values_are_empty(self, value):
        assert is_non_empty(value) is False

    @pytest.mark.parametrize("value", [0, False, "", [], {}, "x"])
    def test_plain_check_only_rejects_absent(self, value):
        assert is_non_empty(value) is True

    def test_list_check(self):
        assert is_non_empty([], check_list_empty=True) is False
        assert is_non_empty((), check_list_empty=True) is False
        assert is_non_empty([0], check_list_empty=True) is True

    def test_list_check_on_wrong_shape(self):
        with pytest.raises(ValidationError, match="check_list_empty"):
            is_non_empty("abc", check_list_empty=True)

    def test_string_check(self):
        assert is_non_empty("", check_string_empty=True) is False
        assert is_non_empty(" ", check_string_empty=True) is True

    def test_string_check_on_wrong_shape(self):
        with pytest.raises(ValidationError, match="check_string_empty"):
            is_non_empty(["a"], check_string_empty=True)

    def test_list_check_takes_precedence(self):
        assert is_non_empty([1], check_list_empty=True, check_string_empty=True) is True

    def test_checks_skip_absent_values(self):
        assert is_non_empty(None, check_string_empty=True) is False

    def test_require_non_empty(self):
        assert require_non_empty("x", "name", check_string_empty=True) == "x"
        with pytest.raises(ValidationError, match='"name" cannot have a value of'):
            require_non_empty("", "name", check_string_empty=True)

    def test_validation_error_is_value_error(self):
        assert issubclass(ValidationError, ValueError)

    def test_missing_is_a_singleton(self):
        assert copy.deepcopy(MISSING) is MISSING
        assert copy.copy(MISSING) is MISSING
        assert type(MISSING)() is MISSING
        assert not MISSING
        assert repr(MISSING) == "MISSING"


# ═══════════════════════════════════════════════════════════════════
#  §2  FORMAT HELPERS
# ═══════════════════════════════════════════════════════════════════

class TestFormats:

    def test_clone_is_independent(self):
        original = {"a": [{"b": 1}], "t": (1, 2)}
        copied = clone(original)
        assert copied == original
        copied["a"][0]["b"] = 2
        assert original["a"][0]["b"] == 1
        assert isinstance(copied["t"], tuple)

    def test_clone_keeps_values_json_would_lose(self):
        when = datetime.date(2024, 2, 29)
        copied = clone({"nan": float("nan"), "inf": float("-inf"), "when": when, 1: "int key"})
        assert math.isnan(copied["nan"])
        assert copied["inf"] == float("-inf")
        assert copied["when"] == when
        assert copied[1] == "int key"

    def test_from_json(self):
        assert from_json('{"a": [1, {"id": 2}], "b": null}') == {"a": [1, {"id": 2}], "b": None}

    def test_from_json_feeds_compare(self):
        before = from_json('{"rows": [{"id": 1, "v": "x"}]}')
        after = from_json('{"rows": [{"id": 1, "v": "y"}]}')
        assert compare(before, after) == [Change(("rows", "v"), "x", "y")]

    def test_change_to_python(self):
        assert change_to_python(Change(("a", "b"), 1, 2)) == {"path": ["a", "b"], "old": 1, "new": 2}

    def test_change_to_python_drops_missing_side(self):
        assert change_to_python(Change(("a",), 1, MISSING)) == {"path": ["a"], "old": 1}

    def test_changes_are_json_serialisable(self):
        changes = compare({"a": 1, "b": {"c": 1}}, {"b": {"c": 2}})
        text = json.dumps(changes_to_python(changes))
        assert json.loads(text) == [
            {"path": ["a"], "old": 1},
            {"path": ["b", "c"], "old": 1, "new": 2},
        ]

    def test_result_to_python(self):
        result = reconcile([{"id": 1, "v": 1}, {"id": 2}], [{"id": 1, "v": 2}, {"id": 3}])
        assert result_to_python(result) == {
            "removed": [{"id": 2}],
            "added": [{"id": 3}],
            "changed": [
                {
                    "old": {"id": 1, "v": 1},
                    "new": {"id": 1, "v": 2},
                    "difference": [{"path": ["v"], "old": 1, "new": 2}],
                }
            ],
        }

    @pytest.mark.parametrize("path,expected", [
        ((), "(root)"),
        (("a",), "a"),
        (("a", "b", 3), "a.b.3"),
    ])
    def test_format_path(self, path, expected):
        assert format_path(path) == expected


# ═══════════════════════════════════════════════════════════════════
#  §3  CONFIGURATION
# ═══════════════════════════════════════════════════════════════════

class TestConfig:

    @pytest.fixture(autouse=True)
    def _clean_env(self, monkeypatch):
        for key in ("IDENTITY_FIELDS", "REPORT_REMOVED", "LOG_LEVEL"):
            monkeypatch.delenv(f"RECDIFF_{key}", raising=False)

    def test_defaults(self):
        config = load_config()
        assert config == DiffConfig()
        assert config.identity_fields == ("id",)
        assert config.report_removed is False
        assert config.log_level == "info"

    def test_identity_fields_from_env(self, monkeypatch):
        monkeypatch.setenv("RECDIFF_IDENTITY_FIELDS", " itemId , id ,,")
        assert load_config().identity_fields == ("itemId", "id")

    def test_empty_identity_fields_rejected(self, monkeypatch):
        monkeypatch.setenv("RECDIFF_IDENTITY_FIELDS", " , ")
        with pytest.raises(ValueError, match="Identity fields"):
            load_config()

    @pytest.mark.parametrize("raw,expected", [
        ("true", True), ("1", True), ("YES", True), ("false", False), ("0", False),
    ])
    def test_report_removed_from_env(self, monkeypatch, raw, expected):
        monkeypatch.setenv("RECDIFF_REPORT_REMOVED", raw)
        assert load_config().report_removed is expected

    def test_log_level_normalised(self, monkeypatch):
        monkeypatch.setenv("RECDIFF_LOG_LEVEL", "DEBUG")
        assert load_config().log_level == "debug"

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("RECDIFF_LOG_LEVEL", "verbose")
        with pytest.raises(ValueError, match="Invalid log level"):
            load_config()

    def test_list_mode(self):
        mode = DiffConfig(identity_fields=("code",), report_removed=True).list_mode()
        assert mode == ByIdentity(("code",), report_removed=True)
        assert compare([{"code": "A"}], [], mode) == [Change((), {"code": "A"}, None)]


# ═══════════════════════════════════════════════════════════════════
#  §4  LOGGING
# ═══════════════════════════════════════════════════════════════════

class TestLogging:

    def test_setup_logging_writes_json_to_stderr(self, capsys):
        setup_logging("warning")
        try:
            log = get_logger("tests")
            log.info("filtered.out")
            log.warning("kept", records=3)
            lines = capsys.readouterr().err.strip().splitlines()
        finally:
            structlog.reset_defaults()

        assert len(lines) == 1
        entry = json.loads(lines[0])
        assert entry["event"] == "kept"
        assert entry["level"] == "warning"
        assert entry["component"] == "recdiff.tests"
        assert entry["records"] == 3
        assert "ts" in entry

    def test_unknown_level_falls_back_to_info(self, capsys):
        setup_logging("chatty")
        try:
            log = get_logger("tests")
            log.debug("filtered.out")
            log.info("kept")
            lines = capsys.readouterr().err.strip().splitlines()
        finally:
            structlog.reset_defaults()

        assert [json.loads(line)["event"] for line in lines] == ["kept"]

    def test_default_component_is_package_root(self):
        with capture_logs() as logs:
            get_logger().info("root.event")
        assert logs[0]["component"] == "recdiff"

    def test_explicit_stream(self, tmp_path):
        path = tmp_path / "events.log"
        with path.open("w") as stream:
            setup_logging("info", stream=stream)
            try:
                get_logger("tests").info("to.file")
            finally:
                structlog.reset_defaults()
        assert json.loads(path.read_text())["event"] == "to.file"

    def test_configure_applies_log_level(self, capsys, monkeypatch):
        monkeypatch.setenv("RECDIFF_LOG_LEVEL", "error")
        try:
            config = configure()
            log = get_logger("tests")
            log.warning("filtered.out")
            log.error("kept")
            lines = capsys.readouterr().err.strip().splitlines()
        finally:
            structlog.reset_defaults()

        assert config.log_level == "error"
        assert [json.loads(line)["event"] for line in lines] == ["kept"]

    def test_configure_with_explicit_config(self, capsys):
        try:
            config = configure(DiffConfig(log_level="debug"))
            get_logger("tests").debug("kept")
            lines = capsys.readouterr().err.strip().splitlines()
        finally:
            structlog.reset_defaults()

        assert config == DiffConfig(log_level="debug")
        assert json.loads(lines[0])["event"] == "kept"
