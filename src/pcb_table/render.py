"""Text rendering of the process table.

Two views:

- ``format_process_list`` — the menu listing.  One block per occupied
  id in ascending order, children in creation order.  The exact text is
  what output-comparison tests check, so change it with care.
- ``format_tree`` — a ``pstree``-style drawing used by the web status.

Both functions are pure: they read the table and return a string.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pcb_table.table import ProcessTable


def format_process_list(table: ProcessTable) -> str:
    """Render every occupied slot with its parent and children.

    Args:
        table: The table to render.

    Returns:
        The listing, one line per fact, ending with a newline.

    """
    lines = ["Process list:"]
    for pid, pcb in table.items():
        lines.append(f"Process id: {pid}")
        if pcb.parent is None:
            lines.append("No parent process")
        else:
            lines.append(f"Parent process: {pcb.parent}")
        if not pcb.children:
            lines.append("No child processes")
        else:
            lines.extend(f"Child process: {child}" for child in pcb.children)
    return "\n".join(lines) + "\n"


def format_tree(table: ProcessTable) -> str:
    """Draw the process forest with box-drawing connectors.

    Walks an explicit stack of ``(pid, prefix, is_last)`` entries, so a
    chain as deep as the table renders without recursion.
    """
    roots = [pid for pid, pcb in table.items() if pcb.is_root]
    stack = [(root, "", i == len(roots) - 1) for i, root in enumerate(roots)]
    stack.reverse()

    lines: list[str] = []
    while stack:
        pid, prefix, is_last = stack.pop()
        connector = "└── " if is_last else "├── "
        lines.append(f"{prefix}{connector}pid {pid}")
        pcb = table.get(pid)
        kids = pcb.children if pcb is not None else ()
        extension = prefix + ("    " if is_last else "│   ")
        stack.extend(
            (child, extension, i == len(kids) - 1) for i, child in reversed(list(enumerate(kids)))
        )

    return "\n".join(lines) if lines else "No processes."
