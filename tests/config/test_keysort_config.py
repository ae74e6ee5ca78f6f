from __future__ import annotations

import pytest

from keysort.config import DEFAULTS, load_config, validate_config, validate_config_api
from keysort.engine.types import KeysortConfig
from keysort.errors import ConfigError


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    monkeypatch.delenv("KEYSORT_PARALLELISM", raising=False)
    monkeypatch.delenv("KEYSORT_FAILURE_LOG_LEVEL", raising=False)


def test_empty_config_yields_defaults():
    assert validate_config({}) == DEFAULTS


def test_input_not_mutated():
    raw = {"prime": {"parallelism": "3"}}
    out = validate_config(raw)
    assert raw == {"prime": {"parallelism": "3"}}
    assert out["prime"]["parallelism"] == 3


def test_negative_parallelism_normalizes_to_auto():
    ok, errs, merged = validate_config_api({"prime": {"parallelism": -7}})
    assert ok, errs
    assert merged["prime"]["parallelism"] == 0


def test_unknown_keys_rejected_with_suggestion():
    ok, errs, merged = validate_config_api({"prime": {"paralelism": 2}, "extra": 1})
    assert not ok and merged is None
    assert any(e.startswith("prime.paralelism unknown key (did you mean 'parallelism')") for e in errs)
    assert any(e.startswith("extra unknown key") for e in errs)


def test_bad_values_collected_in_one_error():
    with pytest.raises(ConfigError) as ei:
        validate_config(
            {
                "version": "v9",
                "prime": {"parallelism": "many", "thread_name_prefix": " "},
                "failures": {"log_level": "LOUD"},
            }
        )
    lines = str(ei.value).split("\n")
    assert len(lines) == 4
    assert lines[0].startswith("version")


def test_bool_parallelism_rejected():
    ok, errs, _ = validate_config_api({"prime": {"parallelism": True}})
    assert not ok
    assert errs == ["prime.parallelism must be an integer"]


def test_load_config_without_path_returns_defaults():
    assert load_config() == KeysortConfig()


def test_load_config_from_yaml(tmp_path):
    p = tmp_path / "keysort.yaml"
    p.write_text(
        "version: v1\nprime:\n  parallelism: 4\n  thread_name_prefix: sorter\nfailures:\n  log_level: debug\n",
        encoding="utf-8",
    )
    cfg = load_config(str(p))
    assert cfg == KeysortConfig(parallelism=4, thread_name_prefix="sorter", failure_log_level="DEBUG")


def test_empty_yaml_file_is_defaults(tmp_path):
    p = tmp_path / "empty.yaml"
    p.write_text("", encoding="utf-8")
    assert load_config(str(p)) == KeysortConfig()


def test_env_overrides(monkeypatch, tmp_path):
    p = tmp_path / "keysort.yaml"
    p.write_text("prime:\n  parallelism: 4\n", encoding="utf-8")
    monkeypatch.setenv("KEYSORT_PARALLELISM", "2")
    monkeypatch.setenv("KEYSORT_FAILURE_LOG_LEVEL", "error")
    cfg = load_config(str(p))
    assert cfg.parallelism == 2
    assert cfg.failure_log_level == "ERROR"


def test_bad_env_override_raises(monkeypatch):
    monkeypatch.setenv("KEYSORT_PARALLELISM", "lots")
    with pytest.raises(ConfigError):
        load_config()


def test_unreadable_or_invalid_files(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "missing.yaml"))
    bad = tmp_path / "bad.yaml"
    bad.write_text("prime: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(bad))
    listy = tmp_path / "list.yaml"
    listy.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(listy))


@pytest.mark.parametrize("value", [2.9, "2.5", float("nan")])
def test_non_integral_parallelism_rejected(value):
    ok, errs, _ = validate_config_api({"prime": {"parallelism": value}})
    assert not ok
    assert errs == ["prime.parallelism must be an integer"]


def test_integral_float_parallelism_accepted():
    assert validate_config({"prime": {"parallelism": 3.0}})["prime"]["parallelism"] == 3
