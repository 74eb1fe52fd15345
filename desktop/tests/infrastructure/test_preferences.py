"""Local Preferences — tests for the compact-mode / precision preference file."""

import json

from countdown_todo.core.domain_types import CountdownPrecision
from countdown_todo.infrastructure.preferences import (
    COMPACT_MODE_KEY, COMPACT_PRECISION_KEY, PreferenceStore,
)


def test_defaults_when_file_missing(tmp_path):
    prefs = PreferenceStore(tmp_path / "missing.json")
    assert prefs.compact_mode() is False
    assert prefs.compact_precision() is CountdownPrecision.MINUTE


def test_values_stored_as_strings_under_fixed_keys(tmp_path):
    path = tmp_path / "nested" / "prefs.json"
    prefs = PreferenceStore(path)
    prefs.set_compact_mode(True)
    prefs.set_compact_precision(CountdownPrecision.HOUR)

    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored == {COMPACT_MODE_KEY: "1", COMPACT_PRECISION_KEY: "hour"}

    prefs.set_compact_mode(False)
    assert json.loads(path.read_text(encoding="utf-8"))[COMPACT_MODE_KEY] == "0"


def test_new_store_reads_persisted_values(tmp_path):
    path = tmp_path / "prefs.json"
    PreferenceStore(path).set_compact_precision(CountdownPrecision.SECOND)
    assert PreferenceStore(path).compact_precision() is CountdownPrecision.SECOND


def test_file_read_only_once(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text(json.dumps({COMPACT_MODE_KEY: "1"}), encoding="utf-8")
    prefs = PreferenceStore(path)
    assert prefs.compact_mode() is True
    path.write_text(json.dumps({COMPACT_MODE_KEY: "0"}), encoding="utf-8")
    assert prefs.compact_mode() is True


def test_corrupt_or_unknown_values_fall_back(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text("{not json", encoding="utf-8")
    assert PreferenceStore(path).compact_mode() is False

    path.write_text(json.dumps({COMPACT_PRECISION_KEY: "week"}), encoding="utf-8")
    assert PreferenceStore(path).compact_precision() is CountdownPrecision.MINUTE
