"""The menu — command dispatcher for the process table.

The menu maps a numeric selection to a tree operation and returns the
text to show the user.  It never reads input or prints; the REPL does
that.  Keeping the two apart means every selection can be tested by
calling ``execute()`` and comparing strings.

Selections::

    1  reset the table, then list it
    2  create a child of <pid>, then list it
    3  destroy all descendants of <pid>, then list it
    4  tear the table down and stop

Ignored requests (unknown parent, full table) produce no output at all,
matching the table's silent no-op policy.  A strict table raises
instead, and the menu shows that as an ``Error:`` line.  An unknown
selection number is ignored.
"""

from collections.abc import Callable
from enum import IntEnum
from typing import TypeAlias

from pcb_table.render import format_process_list
from pcb_table.table import ProcessTable, TableError

# Type alias for a selection handler: takes an optional pid, returns output.
_Handler: TypeAlias = Callable[[int | None], str]

MENU_TEXT = (
    "Process creation and destruction\n"
    "--------------------------------\n"
    "1) Initialize process hierarchy\n"
    "2) Create a new child process\n"
    "3) Destroy all descendants of a process\n"
    "4) Quit program and free memory\n"
    "Enter selection: "
)


class Selection(IntEnum):
    """Menu choices, numbered as the user types them."""

    INITIALIZE = 1
    CREATE = 2
    DESTROY = 3
    QUIT = 4


_PROMPTS: dict[Selection, str] = {
    Selection.CREATE: "Enter the parent process id: ",
    Selection.DESTROY: "Enter the parent process whose descendants are to be destroyed: ",
}


class Menu:
    """Dispatch menu selections against one process table."""

    QUIT_MESSAGE = "Quitting program...\n"

    def __init__(self, *, table: ProcessTable) -> None:
        """Create a menu driving *table*.

        Args:
            table: The process table the selections operate on.

        """
        self._table = table
        self._finished = False
        self._commands: dict[Selection, _Handler] = {
            Selection.INITIALIZE: self._cmd_initialize,
            Selection.CREATE: self._cmd_create,
            Selection.DESTROY: self._cmd_destroy,
            Selection.QUIT: self._cmd_quit,
        }

    @property
    def table(self) -> ProcessTable:
        """Return the table this menu drives."""
        return self._table

    @property
    def finished(self) -> bool:
        """Return True once QUIT has been selected."""
        return self._finished

    @staticmethod
    def prompt_for(selection: int) -> str | None:
        """Return the pid prompt for *selection*, or None if it takes no pid."""
        try:
            return _PROMPTS.get(Selection(selection))
        except ValueError:
            return None

    def execute(self, selection: int, pid: int | None = None) -> str:
        """Run one selection and return its output.

        Args:
            selection: The menu number the user chose.
            pid: The process id answered to the selection's prompt, if
                the selection has one.

        Returns:
            The text to display; empty if nothing observable happened.
            A strict table's rejection is reported as ``Error: ...``.

        """
        try:
            choice = Selection(selection)
        except ValueError:
            return ""
        try:
            return self._commands[choice](pid)
        except TableError as e:
            return f"Error: {e}\n"

    def _cmd_initialize(self, _pid: int | None) -> str:
        """Reset the table to a lone root process."""
        self._table.reset()
        return format_process_list(self._table)

    def _cmd_create(self, pid: int | None) -> str:
        """Create a child of *pid*."""
        if pid is None or self._table.create_child(pid) is None:
            return ""
        return format_process_list(self._table)

    def _cmd_destroy(self, pid: int | None) -> str:
        """Destroy every descendant of *pid*."""
        if pid is None:
            return ""
        valid = self._table.is_occupied(pid)
        self._table.destroy_descendants(pid)
        return format_process_list(self._table) if valid else ""

    def _cmd_quit(self, _pid: int | None) -> str:
        """Free every process and stop the loop."""
        self._table.teardown()
        self._finished = True
        return self.QUIT_MESSAGE
