"""Table configuration — capacity and strictness, from defaults or JSON.

A configuration file is a JSON object; every key is optional::

    {"capacity": 128, "strict": false}

Missing keys take the defaults below.  Anything that cannot be read or
does not describe a usable table raises ``ConfigError``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from pcb_table.table import DEFAULT_CAPACITY, ProcessTable

if TYPE_CHECKING:
    import argparse

    from pcb_table.logging import Logger


class ConfigError(RuntimeError):
    """Raise when a configuration cannot be loaded or is invalid."""


@dataclass(frozen=True)
class TableConfig:
    """Settings needed to build a process table."""

    capacity: int = DEFAULT_CAPACITY
    strict: bool = False

    def __post_init__(self) -> None:
        """Reject capacities that cannot hold even the root process."""
        if isinstance(self.capacity, bool) or not isinstance(self.capacity, int):
            msg = f"capacity must be an integer, got {self.capacity!r}"
            raise ConfigError(msg)
        if self.capacity < 1:
            msg = f"capacity must be at least 1, got {self.capacity}"
            raise ConfigError(msg)
        if not isinstance(self.strict, bool):
            msg = f"strict must be a boolean, got {self.strict!r}"
            raise ConfigError(msg)

    def build(self, *, logger: Logger | None = None) -> ProcessTable:
        """Return a new empty table with these settings."""
        return ProcessTable(capacity=self.capacity, strict=self.strict, logger=logger)


def load_config(path: Path) -> TableConfig:
    """Load a configuration from a JSON file.

    Args:
        path: Location of the JSON file.

    Returns:
        The parsed configuration.

    Raises:
        ConfigError: If the file is unreadable, not a JSON object, or
            holds invalid values.

    """
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        msg = f"Cannot load config: {e}"
        raise ConfigError(msg) from e

    if not isinstance(data, dict):
        msg = f"Config must be a JSON object, got {type(data).__name__}"
        raise ConfigError(msg)

    return TableConfig(
        capacity=data.get("capacity", DEFAULT_CAPACITY),
        strict=data.get("strict", False),
    )


def add_config_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the ``--config``, ``--capacity`` and ``--strict`` options to *parser*."""
    parser.add_argument("--config", type=Path, default=None, help="JSON configuration file")
    parser.add_argument("--capacity", type=int, default=None, help="number of table slots")
    parser.add_argument(
        "--strict", action="store_true", help="report invalid requests instead of ignoring them"
    )


def resolve_config(args: argparse.Namespace) -> TableConfig:
    """Merge the config file (if any) with command-line overrides.

    Raises:
        ConfigError: If the file or an override is invalid.

    """
    config = load_config(args.config) if args.config is not None else TableConfig()
    capacity = args.capacity if args.capacity is not None else config.capacity
    return TableConfig(capacity=capacity, strict=config.strict or args.strict)
