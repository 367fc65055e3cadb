"""Configuration management for mfsmirror."""

import logging
import os
from pathlib import Path
from typing import Optional

from .exceptions import MfsConfigError
from .utils import (
    DEFAULT_API_URL,
    DEFAULT_FLUSH_DEPTH,
    DEFAULT_TIMEOUT,
    multiaddr_to_url,
)

logger = logging.getLogger(__name__)


class Config:
    """Configuration resolved from environment, config file and the IPFS repo.

    Lookup order for every setting is: environment variable, then the
    ``KEY=value`` config file at ~/.config/mfsmirror/config, then a default.
    The API address additionally falls back to the multiaddr the local node
    writes to ``$IPFS_PATH/api``.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        if config_dir is None:
            config_dir = Path.home() / ".config" / "mfsmirror"
        self.config_dir = config_dir
        self.config_file = config_dir / "config"

    def _load_file(self) -> dict[str, str]:
        """Read KEY=value pairs from the config file."""
        values: dict[str, str] = {}
        if not self.config_file.exists():
            return values

        with open(self.config_file, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                values[key.strip()] = value.strip().strip('"').strip("'")
        return values

    def _get(self, key: str) -> Optional[str]:
        value = os.environ.get(key)
        if value:
            return value
        return self._load_file().get(key) or None

    def _ipfs_repo_path(self) -> Path:
        ipfs_path = os.environ.get("IPFS_PATH")
        if ipfs_path:
            return Path(ipfs_path).expanduser()
        return Path.home() / ".ipfs"

    def _api_url_from_repo(self) -> Optional[str]:
        api_file = self._ipfs_repo_path() / "api"
        if not api_file.exists():
            return None

        multiaddr = api_file.read_text(encoding="utf-8").strip()
        try:
            url = multiaddr_to_url(multiaddr)
        except ValueError as e:
            raise MfsConfigError(f"Cannot use API address in {api_file}: {e}") from e
        logger.debug("Using API address %s from %s", url, api_file)
        return url

    @property
    def api_url(self) -> str:
        """Base URL of the IPFS node's RPC API."""
        url = self._get("MFSMIRROR_API_URL") or self._api_url_from_repo()
        return (url or DEFAULT_API_URL).rstrip("/")

    @property
    def api_auth(self) -> Optional[str]:
        """Value for the Authorization header, if the RPC API requires one."""
        return self._get("MFSMIRROR_API_AUTH")

    @property
    def flush_depth(self) -> int:
        """Default flush depth."""
        return self._get_int("MFSMIRROR_FLUSH_DEPTH", DEFAULT_FLUSH_DEPTH)

    @property
    def timeout(self) -> float:
        """Default request timeout in seconds."""
        value = self._get("MFSMIRROR_TIMEOUT")
        if value is None:
            return DEFAULT_TIMEOUT
        try:
            return float(value)
        except ValueError as e:
            raise MfsConfigError(f"MFSMIRROR_TIMEOUT is not a number: {value}") from e

    def _get_int(self, key: str, default: int) -> int:
        value = self._get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError as e:
            raise MfsConfigError(f"{key} is not an integer: {value}") from e


config = Config()
