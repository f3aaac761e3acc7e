# filecipher/session_log.py
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List

from .crypto import IoFailure

logger = logging.getLogger("filecipher")

_LEVELS = {'INFO': logging.INFO, 'WARN': logging.WARNING, 'ERROR': logging.ERROR}

class SessionLog:
    """Append-only list of timestamped status lines shown in the Files menu."""

    def __init__(self) -> None:
        self._lines: List[str] = []

    def push(self, level: str, message: str) -> str:
        now = datetime.now().strftime("%H:%M:%S")
        line = f"{now} [{level}] {message}"
        self._lines.append(line)
        logger.log(_LEVELS.get(level, logging.INFO), message)
        return line

    def extend(self, level: str, messages: Iterable[str]) -> None:
        for message in messages:
            self.push(level, message)

    def lines(self) -> List[str]:
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def save(self, path: Path) -> None:
        try:
            with Path(path).open('w', encoding='utf-8') as f:
                for line in self._lines:
                    f.write(line + "\n")
        except OSError as e:
            self.push('ERROR', f"Could not write log file {path}: {e}")
            raise IoFailure(f"Could not write log file {path}: {e}") from e
        self.push('INFO', f"Logs saved to {path}")
