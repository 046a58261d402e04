"""The process table — a fixed-capacity arena of PCBs forming a tree.

The table owns N slots.  Each slot is either free (``None``) or holds
a ``PCB``; the slot index is the process id.  Processes are linked
parent → child only at creation time, and always to a freshly
allocated slot, so the structure can never contain a cycle.

Tree operations::

    reset()                  discard everything, create root 0
    create_child(p)          allocate q, link q under p
    destroy_descendants(p)   free p's whole subtree, keep p
    teardown()               free every slot

Invalid requests (unknown parent, full table) are ignored by default:
the call returns without touching the table and a WARNING is logged.
A table built with ``strict=True`` raises instead.  Either way the
table is never left half-modified.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeAlias

from pcb_table.allocator import SlotAllocator
from pcb_table.logging import EventKind, Logger, LogLevel
from pcb_table.pcb import PCB

if TYPE_CHECKING:
    from collections.abc import Iterator

DEFAULT_CAPACITY = 64
ROOT_PID = 0

_NO_CHILD = -1

Snapshot: TypeAlias = dict[int, tuple[int | None, tuple[int, ...]]]


class TableError(Exception):
    """Base class for process table errors."""


class InvalidReferenceError(TableError):
    """Raise when an operation targets an id that is out of range or free."""


class CapacityExhaustedError(TableError):
    """Raise when a process is requested but every slot is occupied."""


class TableCorruptionError(TableError):
    """Raise when ``validate()`` finds a broken tree invariant."""


class ProcessTable:
    """A fixed-size table of PCBs connected as a process tree.

    Every table is an independent value — there is no module-level
    state — so tests can build as many as they like.
    """

    def __init__(
        self,
        *,
        capacity: int = DEFAULT_CAPACITY,
        strict: bool = False,
        logger: Logger | None = None,
    ) -> None:
        """Create an empty table.

        Args:
            capacity: Number of slots; ids range over ``[0, capacity)``.
            strict: Raise on invalid or unsatisfiable requests instead
                of ignoring them.
            logger: Event log to write to.  A fresh one is created if
                omitted.

        Raises:
            ValueError: If capacity is less than 1.

        """
        self._allocator = SlotAllocator(capacity=capacity)
        self._slots: list[PCB | None] = [None] * capacity
        self._strict = strict
        self._logger = logger if logger is not None else Logger()

    # -- Queries ---------------------------------------------------------------

    @property
    def capacity(self) -> int:
        """Return the number of slots."""
        return self._allocator.capacity

    @property
    def strict(self) -> bool:
        """Return True if invalid requests raise instead of being ignored."""
        return self._strict

    @property
    def logger(self) -> Logger:
        """Return the table's event log."""
        return self._logger

    @property
    def allocator(self) -> SlotAllocator:
        """Return the slot allocator (read-only use)."""
        return self._allocator

    def get(self, pid: int) -> PCB | None:
        """Return the PCB in slot *pid*, or None if free or out of range."""
        if not self._allocator.in_range(pid):
            return None
        return self._slots[pid]

    def is_occupied(self, pid: int) -> bool:
        """Return True if *pid* names an occupied slot."""
        return self.get(pid) is not None

    def pids(self) -> list[int]:
        """Return the occupied ids in ascending order."""
        return [pid for pid, pcb in enumerate(self._slots) if pcb is not None]

    def items(self) -> Iterator[tuple[int, PCB]]:
        """Yield ``(pid, pcb)`` pairs for occupied slots in ascending order."""
        for pid, pcb in enumerate(self._slots):
            if pcb is not None:
                yield pid, pcb

    def descendants(self, pid: int) -> list[int]:
        """Return the strict descendants of *pid* in pre-order.

        An unknown *pid* has no descendants.
        """
        pcb = self.get(pid)
        if pcb is None:
            return []
        result: list[int] = []
        stack = list(reversed(pcb.children))
        while stack:
            current = stack.pop()
            result.append(current)
            child = self._slots[current]
            if child is not None:
                stack.extend(reversed(child.children))
        return result

    def snapshot(self) -> Snapshot:
        """Return an immutable view: ``{pid: (parent, children)}``."""
        return {pid: (pcb.parent, pcb.children) for pid, pcb in self.items()}

    def __contains__(self, pid: object) -> bool:
        """Return True if *pid* is an occupied id."""
        return isinstance(pid, int) and self.is_occupied(pid)

    def __len__(self) -> int:
        """Return the number of occupied slots."""
        return self._allocator.occupied_count

    def __iter__(self) -> Iterator[int]:
        """Iterate over occupied ids in ascending order."""
        return iter(self.pids())

    # -- Tree operations -------------------------------------------------------

    def reset(self) -> None:
        """Discard every process and create the root (id 0).

        Works from any state, including an empty or a full table.
        """
        self._release_all()
        self._slots[ROOT_PID] = PCB(parent=None)
        self._allocator.occupy(ROOT_PID)
        self._logger.record(EventKind.RESET, "Process table reset (root pid 0)", pid=ROOT_PID)

    def create_child(self, parent: int) -> int | None:
        """Create a new process as the last child of *parent*.

        The new PCB is built before the table is touched, so running out
        of memory part way leaves no orphan slot and no dangling link.

        Args:
            parent: Id of the creating process.

        Returns:
            The new process id, or None if the request was ignored.

        Raises:
            InvalidReferenceError: In strict mode, if *parent* is out of
                range or free.
            CapacityExhaustedError: In strict mode, if the table is full.

        """
        parent_pcb = self.get(parent)
        if parent_pcb is None:
            self._reject(InvalidReferenceError(f"Process {parent} not found"), pid=parent)
            return None

        pid = self._allocator.find_free_index()
        if pid is None:
            self._reject(
                CapacityExhaustedError(f"Cannot create child of {parent}: table is full"),
                pid=parent,
            )
            return None

        child = PCB(parent=parent)
        self._allocator.occupy(pid)
        self._slots[pid] = child
        try:
            parent_pcb.add_child(pid)
        except MemoryError:
            self._slots[pid] = None
            self._allocator.release(pid)
            raise

        self._logger.record(EventKind.CREATE, f"Created process {pid} (parent {parent})", pid=pid)
        return pid

    def destroy_descendants(self, pid: int) -> list[int]:
        """Free every strict descendant of *pid*, keeping *pid* itself.

        Children are visited in creation order and each subtree is torn
        down before its own root is freed (post-order), so no freed slot
        is ever referenced by a live PCB.  The walk uses an explicit
        stack: a chain as deep as the table never reaches the
        interpreter's recursion limit.

        Args:
            pid: Id of the process whose descendants are destroyed.

        Returns:
            The freed ids in the order they were freed.  Empty if *pid*
            is a leaf or the request was ignored.

        Raises:
            InvalidReferenceError: In strict mode, if *pid* is out of
                range or free.

        """
        target = self.get(pid)
        if target is None:
            self._reject(InvalidReferenceError(f"Process {pid} not found"), pid=pid)
            return []

        freed: list[int] = []
        stack: list[tuple[int, Iterator[int]]] = [(pid, iter(target.clear_children()))]
        while stack:
            current, pending = stack[-1]
            child = next(pending, _NO_CHILD)
            if child != _NO_CHILD:
                child_pcb = self._slots[child]
                if child_pcb is not None:
                    stack.append((child, iter(child_pcb.clear_children())))
                continue
            stack.pop()
            if current != pid:
                self._release(current)
                freed.append(current)

        if freed:
            ids = ", ".join(str(p) for p in freed)
            self._logger.record(
                EventKind.DESTROY,
                f"Destroyed {len(freed)} descendant(s) of {pid}: {ids}",
                pid=pid,
            )
        return freed

    def teardown(self) -> int:
        """Free every occupied slot.

        Returns:
            The number of processes freed (0 on an already empty table).

        """
        count = self._release_all()
        if count:
            self._logger.record(EventKind.TEARDOWN, f"Process table torn down ({count} freed)")
        return count

    # -- Consistency -----------------------------------------------------------

    def validate(self) -> None:
        """Check the tree invariants.

        Raises:
            TableCorruptionError: On the first violation found.

        """
        owners: dict[int, int] = {}
        for pid, slot in enumerate(self._slots):
            if (slot is not None) != self._allocator.is_occupied(pid):
                msg = f"Slot {pid} disagrees with the allocator"
                raise TableCorruptionError(msg)
            if slot is None:
                continue
            if slot.parent is not None:
                parent_pcb = self.get(slot.parent)
                if parent_pcb is None or pid not in parent_pcb.children:
                    msg = f"Process {pid} is not listed by its parent {slot.parent}"
                    raise TableCorruptionError(msg)
            for child in slot.children:
                child_pcb = self.get(child)
                if child_pcb is None:
                    msg = f"Process {pid} links to free slot {child}"
                    raise TableCorruptionError(msg)
                if child_pcb.parent != pid:
                    msg = f"Process {child} is listed by {pid} but its parent is {child_pcb.parent}"
                    raise TableCorruptionError(msg)
                if child in owners:
                    msg = f"Process {child} is listed by both {owners[child]} and {pid}"
                    raise TableCorruptionError(msg)
                owners[child] = pid

        for pid, slot in self.items():
            seen = {pid}
            ancestor = slot.parent
            while ancestor is not None:
                if ancestor in seen:
                    msg = f"Process {pid} is its own ancestor"
                    raise TableCorruptionError(msg)
                seen.add(ancestor)
                ancestor_pcb = self._slots[ancestor]
                ancestor = ancestor_pcb.parent if ancestor_pcb is not None else None

    # -- Internals -------------------------------------------------------------

    def _reject(self, error: TableError, *, pid: int) -> None:
        """Log an ignored request about *pid*, or raise it in strict mode."""
        self._logger.record(EventKind.IGNORED, f"Ignored: {error}", pid=pid, level=LogLevel.WARNING)
        if self._strict:
            raise error

    def _release(self, pid: int) -> None:
        self._slots[pid] = None
        self._allocator.release(pid)

    def _release_all(self) -> int:
        count = len(self)
        self._slots = [None] * self.capacity
        self._allocator.release_all()
        return count

    def __repr__(self) -> str:
        """Return a debug-friendly representation."""
        return f"ProcessTable(capacity={self.capacity}, processes={len(self)})"
