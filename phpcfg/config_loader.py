from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from .config_model import KeyValuePair
from .config_parser import deserialize
from .config_writer import WriterOptions, write
from .errors import ConfigIOError, ConfigSyntaxError, DeserError

logger = logging.getLogger(__name__)


class ConfigLoader:
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def read(self) -> str:
        try:
            text = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ConfigIOError(f"{self.path} is not valid UTF-8: {exc.reason}") from exc
        logger.debug("read %d characters from %s", len(text), self.path)
        return text

    def load(self) -> List[KeyValuePair]:
        return deserialize(self.read())


class ConfigWriter:
    def __init__(self, path: str | Path, options: WriterOptions | None = None) -> None:
        self.path = Path(path)
        self.options = options

    def dump(self, pairs: Sequence[KeyValuePair]) -> None:
        with self.path.open("w", encoding="utf-8", newline="\n") as handle:
            write(pairs, handle, self.options)
        logger.debug("wrote %d top-level entries to %s", len(pairs), self.path)


__all__ = ["ConfigLoader", "ConfigWriter", "ConfigIOError", "ConfigSyntaxError", "DeserError"]
