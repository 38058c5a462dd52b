"""Configuration loading helpers for ghtodep."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

import yaml

from ..errors import InvalidInputError
from .models import GlobalConfig

GLOBAL_CONFIG_FILENAME = "config.yaml"


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return data


def _write_file(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as stream:
        if path.suffix in (".yaml", ".yml"):
            yaml.safe_dump(payload, stream, allow_unicode=True, sort_keys=False)
        else:
            json.dump(payload, stream, indent=2, ensure_ascii=False)


@dataclass(slots=True)
class ConfigLocator:
    """Resolve the ghtodep home directory and the files below it."""

    project_root: Path | None = None
    logs_dir: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get("GHTODEP_HOME")
        if env_root:
            root = Path(env_root).expanduser().resolve()
        elif self.project_root is not None:
            root = self.project_root.resolve()
        else:
            xdg = os.environ.get("XDG_CONFIG_HOME")
            base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
            root = (base / "ghtodep").resolve()
        self.project_root = root
        self.logs_dir = (root / "logs").resolve()

    def global_config_path(self) -> Path:
        return self.project_root / GLOBAL_CONFIG_FILENAME


class ConfigRepository:
    """Repository encapsulating config IO and schema validation."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()
        self._global_cache: GlobalConfig | None = None

    def load_global_config(self, path: Path | None = None) -> GlobalConfig:
        if path is None and self._global_cache is not None:
            return self._global_cache
        target = path or self.locator.global_config_path()
        if target.exists():
            global_cfg = GlobalConfig.model_validate(_read_file(target))
        elif path is not None:
            raise FileNotFoundError(f"Configuration not found: {path}")
        else:
            global_cfg = GlobalConfig()
        self._global_cache = global_cfg
        return global_cfg

    def save_global_config(self, config: GlobalConfig) -> Path:
        path = self.locator.global_config_path()
        _write_file(path, config.model_dump(mode="json"))
        self._global_cache = config
        return path


def parse_repo_reference(reference: str) -> tuple[str, str]:
    """Split ``owner/repo`` or ``https://github.com/owner/repo`` into its parts."""

    text = reference.strip()
    if "github.com" in text:
        if "://" not in text:
            text = f"https://{text}"
        parts = [part for part in urlparse(text).path.split("/") if part]
        if len(parts) != 2:
            raise InvalidInputError(
                "Invalid GitHub URL format. Expected: https://github.com/owner/repo"
            )
    else:
        parts = text.split("/")
        if len(parts) != 2 or not all(parts):
            raise InvalidInputError(
                "Invalid format. Expected: owner/repo or https://github.com/owner/repo"
            )
    owner, repo = parts
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    return owner, repo


__all__ = ["ConfigLocator", "ConfigRepository", "GLOBAL_CONFIG_FILENAME", "parse_repo_reference"]
