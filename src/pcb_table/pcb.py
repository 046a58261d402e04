"""Process Control Block (PCB).

In this simulation a PCB carries only the bookkeeping the table needs
to keep the process tree consistent: who created the process, and which
processes it has created in turn.

The id of a process is not stored on the PCB — it is the index of the
slot the PCB occupies in the table.  That keeps one source of truth for
identity and makes "free the slot" and "forget the process" the same
action.
"""

from __future__ import annotations


class PCB:
    """A simulated process control block.

    The root process has ``parent is None``; every other process records
    the id of the process that created it.  Children are kept in creation
    order, which is the order the listing prints them in.
    """

    __slots__ = ("_children", "_parent")

    def __init__(self, *, parent: int | None = None) -> None:
        """Create a PCB with no children.

        Args:
            parent: Id of the creating process, or None for the root.

        """
        self._parent: int | None = parent
        self._children: list[int] = []

    @property
    def parent(self) -> int | None:
        """Return the parent id, or None for the root."""
        return self._parent

    @property
    def children(self) -> tuple[int, ...]:
        """Return the child ids in creation order."""
        return tuple(self._children)

    @property
    def is_root(self) -> bool:
        """Return True if this PCB has no parent."""
        return self._parent is None

    def add_child(self, pid: int) -> None:
        """Append *pid* to the end of the child list."""
        self._children.append(pid)

    def clear_children(self) -> list[int]:
        """Drop every child link and return the ids that were linked."""
        dropped = self._children
        self._children = []
        return dropped

    def __repr__(self) -> str:
        """Return a debug-friendly representation."""
        return f"PCB(parent={self._parent}, children={self._children})"
