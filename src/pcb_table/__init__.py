"""PCB table — a simulated operating-system process table.

A fixed-capacity table of process control blocks linked into a
parent/child tree.  Processes are created as children of existing ones
and whole subtrees are destroyed at once, the bookkeeping a kernel does
on ``fork`` and ``exit``.

Re-exports the main types so callers can write::

    from pcb_table import ProcessTable, format_process_list
"""

from pcb_table.allocator import SlotAllocator
from pcb_table.config import ConfigError, TableConfig, load_config
from pcb_table.logging import EventKind, LogEntry, Logger, LogLevel
from pcb_table.menu import Menu, Selection
from pcb_table.pcb import PCB
from pcb_table.render import format_process_list, format_tree
from pcb_table.table import (
    DEFAULT_CAPACITY,
    ROOT_PID,
    CapacityExhaustedError,
    InvalidReferenceError,
    ProcessTable,
    TableCorruptionError,
    TableError,
)

__all__ = [
    "DEFAULT_CAPACITY",
    "PCB",
    "ROOT_PID",
    "CapacityExhaustedError",
    "ConfigError",
    "EventKind",
    "InvalidReferenceError",
    "LogEntry",
    "LogLevel",
    "Logger",
    "Menu",
    "ProcessTable",
    "Selection",
    "SlotAllocator",
    "TableConfig",
    "TableCorruptionError",
    "TableError",
    "format_process_list",
    "format_tree",
    "load_config",
]
