from __future__ import annotations

from pathlib import Path

import pytest

from focus_tracker.config import load_config


BASE_CONFIG = """web_host = \"127.0.0.1\"
web_port = 8766
dev_enable_docs = false
data_path = \"~/tracker/snapshot.json\"
log_format = \"json\"
"""


def test_config_rejects_unknown_keys(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(BASE_CONFIG + "unexpected = 1\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(config_path)


def test_config_rejects_invalid_type(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(BASE_CONFIG.replace("web_port = 8766", "web_port = \"x\""), encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(config_path)


def test_config_rejects_non_loopback_host(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(BASE_CONFIG.replace("127.0.0.1", "0.0.0.0"), encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(config_path)


def test_config_loads_valid_file(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(BASE_CONFIG, encoding="utf-8")

    cfg = load_config(config_path)
    assert cfg.web_port == 8766
    assert cfg.log_format == "json"
    assert cfg.data_dir == tmp_path
    assert cfg.snapshot_path == Path("~/tracker/snapshot.json").expanduser().resolve()


def test_config_file_is_created_with_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "nested" / "config.toml"

    cfg = load_config(config_path)

    assert config_path.exists()
    assert cfg.web_host == "127.0.0.1"
    assert cfg.snapshot_path == (tmp_path / "nested" / "snapshot.json").resolve()


def test_env_overrides_take_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(BASE_CONFIG, encoding="utf-8")
    monkeypatch.setenv("FOCUS_TRACKER_PORT", "9100")
    monkeypatch.setenv("FOCUS_TRACKER_DEV_ENABLE_DOCS", "yes")

    cfg = load_config(config_path)

    assert cfg.web_port == 9100
    assert cfg.dev_enable_docs is True


def test_symlinked_data_directory_is_refused(tmp_path: Path) -> None:
    real_dir = tmp_path / "real"
    real_dir.mkdir()
    linked_dir = tmp_path / "linked"
    linked_dir.symlink_to(real_dir, target_is_directory=True)

    with pytest.raises(ValueError, match="symlinked data directory"):
        load_config(linked_dir / "config.toml")
    assert not (real_dir / "config.toml").exists()


def test_symlinked_config_file_is_refused(tmp_path: Path) -> None:
    target = tmp_path / "elsewhere.toml"
    target.write_text(BASE_CONFIG, encoding="utf-8")
    config_path = tmp_path / "config.toml"
    config_path.symlink_to(target)

    with pytest.raises(ValueError, match="symlinked config file"):
        load_config(config_path)
