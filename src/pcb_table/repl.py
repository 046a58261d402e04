"""Interactive menu loop for the process table.

The loop is the classic read-eval-print cycle:

    1. **Print** the menu and read a selection.
    2. **Read** a process id if the selection asks for one.
    3. **Eval** — pass both to ``Menu.execute()``.
    4. **Print** the result and loop until QUIT.

Input is read token by token, the way ``scanf("%d")`` would: numbers
may share a line (``2 0``) or span several.  A token that is not an
integer throws away the rest of its line and the round does nothing.
End of input behaves like selecting QUIT.

``TokenReader`` and ``run_loop`` take explicit streams so they can be
driven from tests; ``main()`` wires them to ``stdin``/``stdout``.
"""

import argparse
import re
import sys
from typing import TextIO

from pcb_table.config import ConfigError, add_config_arguments, resolve_config
from pcb_table.menu import MENU_TEXT, Menu, Selection

_EXIT_OK = 0
_EXIT_USAGE = 2

# What scanf("%d") accepts as a whole token: optional sign, ASCII digits.
_INT_TOKEN = re.compile(r"[+-]?[0-9]+")


class TokenReader:
    """Read whitespace-separated integers from a text stream."""

    def __init__(self, stream: TextIO) -> None:
        """Create a reader over *stream*."""
        self._stream = stream
        self._pending: list[str] = []

    def read_int(self) -> int | None:
        """Return the next integer token, or None if the token was not one.

        A bad token discards whatever is left of its line.

        Raises:
            EOFError: If the stream is exhausted.

        """
        while not self._pending:
            line = self._stream.readline()
            if not line:
                raise EOFError
            self._pending = line.split()

        token = self._pending.pop(0)
        if _INT_TOKEN.fullmatch(token) is None:
            self._pending.clear()
            return None
        return int(token)


def run_loop(menu: Menu, reader: TokenReader, out: TextIO) -> int:
    """Drive *menu* from *reader* until QUIT or end of input.

    Args:
        menu: The dispatcher to run selections through.
        reader: Source of selections and process ids.
        out: Where menu text, prompts, and results are written.

    Returns:
        The process exit code (always 0).

    """
    while not menu.finished:
        out.write(MENU_TEXT)
        try:
            selection = reader.read_int()
            if selection is None:
                continue

            pid: int | None = None
            prompt = menu.prompt_for(selection)
            if prompt is not None:
                out.write(prompt)
                pid = reader.read_int()
                if pid is None:
                    continue
        except EOFError:
            out.write("\n" + menu.execute(Selection.QUIT))
            break

        out.write(menu.execute(selection, pid))
    return _EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pcb-table",
        description="Simulate a process control block table from an interactive menu.",
    )
    add_config_arguments(parser)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the menu on stdin/stdout.

    This is the ``pcb-table`` console entry point.
    """
    args = _build_parser().parse_args(argv)
    try:
        config = resolve_config(args)
    except ConfigError as e:
        print(f"pcb-table: {e}", file=sys.stderr)  # noqa: T201
        return _EXIT_USAGE

    menu = Menu(table=config.build())
    try:
        return run_loop(menu, TokenReader(sys.stdin), sys.stdout)
    except KeyboardInterrupt:
        print("\nInterrupted.")  # noqa: T201
        return _EXIT_OK
    finally:
        menu.table.teardown()


if __name__ == "__main__":
    sys.exit(main())
