"""Configuration for the account console."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_NET_VERSION = "42"


def resolve_storage_dir(storage_dir: str | Path | None = None) -> Path:
    if storage_dir:
        return Path(storage_dir).expanduser()

    env_dir = os.getenv("ACCOUNT_CONSOLE_DIR")
    if env_dir:
        return Path(env_dir).expanduser()

    return Path.home() / ".config" / "account-console"


@dataclass
class ConsoleConfig:
    """Console settings from ``config.json`` plus environment overrides.

    Network id precedence, highest first: the ``--net-version`` option,
    ``ACCOUNT_CONSOLE_NET_VERSION``, the ``net_version`` in ``state.json``,
    then ``net_version`` in ``config.json``.
    """

    storage_dir: Path
    export_dir: Path
    net_version: str = DEFAULT_NET_VERSION
    certification_url: str | None = None
    request_timeout: float = 10.0
    net_version_override: str | None = None

    @property
    def config_file(self) -> Path:
        return self.storage_dir / "config.json"

    @property
    def state_file(self) -> Path:
        return self.storage_dir / "state.json"

    @classmethod
    def load(cls, storage_dir: str | Path | None = None) -> "ConsoleConfig":
        storage = resolve_storage_dir(storage_dir)
        storage.mkdir(parents=True, exist_ok=True)

        data: dict[str, Any] = {}
        config_file = storage / "config.json"
        if config_file.exists():
            try:
                with open(config_file, "r") as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                logger.warning("Ignoring unreadable config %s: %s", config_file, e)

        config = cls(
            storage_dir=storage,
            export_dir=Path(data.get("export_dir", storage / "exports")).expanduser(),
            net_version=str(data.get("net_version", DEFAULT_NET_VERSION)),
            certification_url=data.get("certification_url"),
            request_timeout=float(data.get("request_timeout", 10.0)),
        )

        env_net = os.getenv("ACCOUNT_CONSOLE_NET_VERSION")
        if env_net:
            config.net_version = env_net
            config.net_version_override = env_net
        env_url = os.getenv("ACCOUNT_CONSOLE_CERTIFICATION_URL")
        if env_url:
            config.certification_url = env_url

        return config

    def save(self) -> None:
        data = {
            "export_dir": str(self.export_dir),
            "net_version": self.net_version,
            "certification_url": self.certification_url,
            "request_timeout": self.request_timeout,
        }
        with open(self.config_file, "w") as f:
            json.dump(data, f, indent=2)
