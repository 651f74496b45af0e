from __future__ import annotations

import ipaddress
import os
import stat
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, field_validator

DEFAULT_DATA_DIR = Path.home() / ".focus_tracker"
DEFAULT_CONFIG_PATH = DEFAULT_DATA_DIR / "config.toml"
DEFAULT_SNAPSHOT_PATH = DEFAULT_DATA_DIR / "snapshot.json"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)
    _data_dir: Path = PrivateAttr(default=DEFAULT_DATA_DIR)

    web_host: str = "127.0.0.1"
    web_port: int = Field(default=8766, ge=1, le=65535)
    dev_enable_docs: bool = False
    data_path: str = str(DEFAULT_SNAPSHOT_PATH)
    log_format: Literal["json", "text"] = "text"

    @field_validator("web_host")
    @classmethod
    def validate_localhost_only(cls, value: str) -> str:
        host = value.strip()
        if host == "localhost":
            return host
        try:
            ip = ipaddress.ip_address(host)
        except ValueError as exc:
            raise ValueError("web_host must be localhost or a loopback IP") from exc
        if not ip.is_loopback:
            raise ValueError("web_host must be a loopback address")
        return host

    @field_validator("data_path")
    @classmethod
    def expand_data_path(cls, value: str) -> str:
        return str(Path(value).expanduser().resolve(strict=False))

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def snapshot_path(self) -> Path:
        return Path(self.data_path)


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"invalid boolean: {raw}")


def _env_overrides() -> dict[str, Any]:
    mapping: dict[str, tuple[str, str]] = {
        "FOCUS_TRACKER_HOST": ("web_host", "str"),
        "FOCUS_TRACKER_PORT": ("web_port", "int"),
        "FOCUS_TRACKER_DEV_ENABLE_DOCS": ("dev_enable_docs", "bool"),
        "FOCUS_TRACKER_DATA_PATH": ("data_path", "str"),
        "FOCUS_TRACKER_LOG_FORMAT": ("log_format", "str"),
    }
    out: dict[str, Any] = {}
    for env_name, (field_name, kind) in mapping.items():
        raw = os.getenv(env_name)
        if raw is None:
            continue
        if kind == "int":
            out[field_name] = int(raw)
        elif kind == "bool":
            out[field_name] = _parse_bool(raw)
        else:
            out[field_name] = raw.strip()
    return out


def secure_path(path: Path, mode: int) -> None:
    path.chmod(mode)
    actual = stat.S_IMODE(path.stat().st_mode)
    if actual != mode:
        raise PermissionError(f"failed to enforce permissions {oct(mode)} on {path}")


def default_config_toml(data_dir: Path = DEFAULT_DATA_DIR) -> str:
    return f"""web_host = \"127.0.0.1\"
web_port = 8766
dev_enable_docs = false
data_path = \"{(data_dir / 'snapshot.json').as_posix()}\"
log_format = \"text\"
"""


def ensure_app_paths(config_path: Path = DEFAULT_CONFIG_PATH) -> None:
    config_path = config_path.expanduser()
    # checked before resolving, which would follow the link
    if config_path.parent.is_symlink():
        raise ValueError(f"refusing symlinked data directory: {config_path.parent}")
    data_dir = config_path.resolve(strict=False).parent
    data_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
    secure_path(data_dir, 0o700)

    if config_path.is_symlink():
        raise ValueError(f"refusing symlinked config file: {config_path}")
    if not config_path.exists():
        config_path.write_text(default_config_toml(data_dir), encoding="utf-8")
    secure_path(config_path, 0o600)


def load_config(config_path: Path | None = None) -> AppConfig:
    raw_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
    ensure_app_paths(raw_path)
    path = raw_path.resolve(strict=False)
    with path.open("rb") as handle:
        parsed: dict[str, Any] = tomllib.load(handle)
    parsed.update(_env_overrides())
    try:
        config = AppConfig.model_validate(parsed)
    except ValidationError as exc:
        raise ValueError(f"invalid config at {path}: {exc}") from exc
    config._data_dir = path.parent
    return config
