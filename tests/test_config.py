import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from page_scout.config import DiscoveryConfig, load_config


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,suffix,expect_exc",
    [
        ("timeout: 5\nhead_delay: 0.5", ".yaml", None),
        (json.dumps({"timeout": 5, "head_delay": 0.5}), ".json", None),
        ("timeout: -1", ".yaml", ValidationError),
        ("unknown_key: 1", ".yaml", ValidationError),
        ("not: a: mapping", ".yaml", ValueError),
        ("- just\n- a list", ".yaml", TypeError),
        ("{broken", ".json", ValueError),
        ("timeout = 5", ".toml", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, suffix, expect_exc):
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, DiscoveryConfig)
        assert cfg.timeout == 5
        assert cfg.head_delay == 0.5
        assert cfg.result_size == 10


def test_load_config_default_missing_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg = load_config(None)
    assert cfg == DiscoveryConfig()
    assert (cfg.sample_threshold, cfg.sample_shortest, cfg.sample_random) == (200, 20, 180)


def test_load_config_default_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("result_size: 5\n", encoding="utf-8")
    assert load_config(None).result_size == 5


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_sample_sizes_must_fit_threshold():
    with pytest.raises(ValidationError):
        DiscoveryConfig(sample_threshold=100, sample_shortest=20, sample_random=180)


def test_narrow_size_must_fit_limit():
    with pytest.raises(ValidationError):
        DiscoveryConfig(narrow_size=30, narrow_limit=20)


def test_nested_curation_and_secret_masking(tmp_path):
    cfg_path = write_file(
        tmp_path,
        "curation:\n  api_key: super-secret\n  model: gemini-2.0-flash\n  temperature: 0.2\n",
        ".yaml",
    )
    cfg = load_config(cfg_path)
    assert cfg.curation.api_key.get_secret_value() == "super-secret"
    assert cfg.curation.model == "gemini-2.0-flash"
    assert cfg.curation.temperature == 0.2
    assert "super-secret" not in cfg.model_dump_json()


def test_config_is_frozen():
    cfg = DiscoveryConfig()
    with pytest.raises(ValidationError):
        cfg.timeout = 1.0
