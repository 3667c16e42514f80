"""Thresholds and process whitelist used by the process guard."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field

DEFAULT_CONFIG_PATH = "C:\\matcomguard.conf"
DEFAULT_CPU_THRESHOLD = 70.0
DEFAULT_RAM_THRESHOLD = 30.0
DEFAULT_TIME_THRESHOLD = 10
MAX_WHITELIST = 20
MAX_NAME_LEN = 255

_FLOAT = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_INT = re.compile(r"\s*([+-]?\d+)")
_LINE = re.compile(r"[^\n]*\n|[^\n]+")
_WHITELIST_OFFSET = len("WHITELIST=")


@dataclass
class Config:
    """Alert thresholds and the names of processes that are never flagged."""

    cpu_threshold: float = DEFAULT_CPU_THRESHOLD
    ram_threshold: float = DEFAULT_RAM_THRESHOLD
    time_threshold: int = DEFAULT_TIME_THRESHOLD
    whitelist: list[str] = field(default_factory=list)

    def is_whitelisted(self, name: str) -> bool:
        """Return True if ``name`` matches a whitelist entry, ignoring case."""
        wanted = name.lower()
        return any(entry.lower() == wanted for entry in self.whitelist)


def _leading_value(line: str, key: str, pattern: re.Pattern[str]) -> str | None:
    if not line.startswith(key):
        return None
    match = pattern.match(line, len(key))
    return match.group(1) if match else None


def _trim(token: str) -> str:
    # Trailing blanks and line ends go, but the first character always stays.
    return token.rstrip("\n\r ") or token[0]


def parse_config(text: str) -> Config:
    """Build a Config from the text of a configuration file."""
    config = Config()
    for line in _LINE.findall(text):
        if "UMBRAL_CPU=" in line:
            value = _leading_value(line, "UMBRAL_CPU=", _FLOAT)
            if value is not None:
                config.cpu_threshold = float(value)
        elif "UMBRAL_RAM=" in line:
            value = _leading_value(line, "UMBRAL_RAM=", _FLOAT)
            if value is not None:
                config.ram_threshold = float(value)
        elif "UMBRAL_TIEMPO=" in line:
            value = _leading_value(line, "UMBRAL_TIEMPO=", _INT)
            if value is not None:
                config.time_threshold = int(value)
        elif "WHITELIST=" in line:
            for token in filter(None, line[_WHITELIST_OFFSET:].split(",")):
                if len(config.whitelist) >= MAX_WHITELIST:
                    break
                config.whitelist.append(_trim(token)[:MAX_NAME_LEN])
    return config


def load_config(path: str | os.PathLike[str] = DEFAULT_CONFIG_PATH) -> Config:
    """Read the configuration file, falling back to defaults if it cannot be opened."""
    try:
        with open(path, encoding="utf-8", errors="replace", newline="") as handle:
            text = handle.read()
    except OSError:
        return Config()
    return parse_config(text)