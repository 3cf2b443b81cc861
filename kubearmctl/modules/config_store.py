"""Persistent KEY=VALUE node configuration (``k8s.conf``)."""
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from dotenv import dotenv_values, set_key

from kubearmctl.errors import ConfigMissingError

logger = logging.getLogger("kubearmctl.config_store")


class ConfigStore:
    """Line-oriented key/value file with last-write-wins upserts.

    Writes are a read-modify-write of the whole file without locking,
    so only one writer may run at a time.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    @classmethod
    def open(cls, path: Union[str, Path]) -> "ConfigStore":
        """Open an existing store, failing fast if the file is missing."""
        store = cls(path)
        if not store.path.is_file():
            raise ConfigMissingError(store.path)
        return store

    def as_dict(self) -> Dict[str, Optional[str]]:
        if not self.path.is_file():
            raise ConfigMissingError(self.path)
        return dict(dotenv_values(self.path))

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self.as_dict().get(key)
        if value is None or value == "":
            return default
        return value

    def set(self, key: str, value: str) -> None:
        """Replace the line holding ``key`` or append ``key=value``."""
        if not self.path.is_file():
            raise ConfigMissingError(self.path)
        set_key(str(self.path), key, str(value), quote_mode="never")
        logger.debug(f"Stored {key}={value} in {self.path}")
