"""Run settings for the process killer, sourced from the environment."""

from __future__ import annotations

import signal
from dataclasses import dataclass, replace
from functools import lru_cache
from pathlib import Path
from typing import Optional

from .config import ConfigurationError, env_bool, env_float, env_int, env_list, env_str

DEFAULT_QUEUE_SIZE = 100
DEFAULT_MAX_CONCURRENT_KILLS = 64
DEFAULT_SIGNAL_NAME = "SIGKILL" if hasattr(signal, "SIGKILL") else "SIGTERM"


@dataclass(frozen=True)
class KillerSettings:
    queue_size: int = DEFAULT_QUEUE_SIZE
    max_concurrent_kills: int = DEFAULT_MAX_CONCURRENT_KILLS
    exit_timeout: Optional[float] = None
    kill_signal: signal.Signals = signal.Signals[DEFAULT_SIGNAL_NAME]
    exclude_pids: tuple[int, ...] = ()
    exclude_patterns: tuple[str, ...] = ()
    exclude_parent: bool = True
    log_dir: Optional[Path] = None

    def with_overrides(self, **overrides) -> "KillerSettings":
        """Return a validated copy with every non-``None`` override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        updated = replace(self, **changes)
        updated.validate()
        return updated

    def validate(self) -> None:
        if self.queue_size <= 0:
            raise ConfigurationError.invalid_value("queue_size", self.queue_size, "Must be positive")
        if self.max_concurrent_kills <= 0:
            raise ConfigurationError.invalid_value("max_concurrent_kills", self.max_concurrent_kills, "Must be positive")
        if self.exit_timeout is not None and self.exit_timeout < 0:
            raise ConfigurationError.invalid_value("exit_timeout", self.exit_timeout, "Must be non-negative")
        if any(pid <= 0 for pid in self.exclude_pids):
            raise ConfigurationError.invalid_value("exclude_pids", self.exclude_pids, "Process ids are positive integers")


def parse_signal(value: str) -> signal.Signals:
    """Resolve ``SIGKILL``, ``KILL`` or ``9`` to a :class:`signal.Signals` member."""
    candidate = value.strip().upper()
    if candidate.isdigit():
        try:
            return signal.Signals(int(candidate))
        except ValueError as exc:
            raise ConfigurationError.invalid_value("signal", value, "Unknown signal number") from exc
    if not candidate.startswith("SIG"):
        candidate = f"SIG{candidate}"
    try:
        return signal.Signals[candidate]
    except KeyError as exc:
        raise ConfigurationError.invalid_value("signal", value, "Unknown signal name") from exc


def parse_pids(values) -> tuple[int, ...]:
    pids = []
    for raw in values:
        try:
            pids.append(int(raw))
        except (TypeError, ValueError) as exc:
            raise ConfigurationError.invalid_format("exclude_pids", str(raw), "comma separated integers") from exc
    return tuple(pids)


@lru_cache(maxsize=1)
def get_killer_settings() -> KillerSettings:
    """Build settings from ``PROCESS_KILLER_*`` environment variables."""
    log_dir = env_str("PROCESS_KILLER_LOG_DIR")
    # One regex, never split; combine alternatives with "|"
    exclude_pattern = env_str("PROCESS_KILLER_EXCLUDE_PATTERN")
    settings = KillerSettings(
        queue_size=int(env_int("PROCESS_KILLER_QUEUE_SIZE", or_value=DEFAULT_QUEUE_SIZE)),
        max_concurrent_kills=int(env_int("PROCESS_KILLER_MAX_CONCURRENT_KILLS", or_value=DEFAULT_MAX_CONCURRENT_KILLS)),
        exit_timeout=env_float("PROCESS_KILLER_EXIT_TIMEOUT_SECONDS"),
        kill_signal=parse_signal(env_str("PROCESS_KILLER_SIGNAL", or_value=DEFAULT_SIGNAL_NAME)),
        exclude_pids=parse_pids(env_list("PROCESS_KILLER_EXCLUDE_PIDS", or_value=())),
        exclude_patterns=(exclude_pattern,) if exclude_pattern else (),
        exclude_parent=bool(env_bool("PROCESS_KILLER_EXCLUDE_PARENT", or_value=True)),
        log_dir=Path(log_dir).expanduser() if log_dir else None,
    )
    settings.validate()
    return settings


__all__ = [
    "DEFAULT_MAX_CONCURRENT_KILLS",
    "DEFAULT_QUEUE_SIZE",
    "KillerSettings",
    "get_killer_settings",
    "parse_pids",
    "parse_signal",
]
