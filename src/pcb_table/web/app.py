"""Flask application factory for the process table web UI.

The ``create_app`` function builds a table and a menu and returns a
Flask app with three endpoints:

- ``POST /api/execute`` — run one menu selection and return JSON.
- ``GET /api/status`` — process count, capacity, and a tree drawing.
- ``GET /api/log`` — the table's event log, optionally for one pid.
"""

from __future__ import annotations

import argparse
import sys
from typing import TYPE_CHECKING

from flask import Flask, Response, jsonify, request

from pcb_table.config import ConfigError, TableConfig, add_config_arguments, resolve_config
from pcb_table.menu import Menu, Selection
from pcb_table.render import format_tree

if TYPE_CHECKING:
    from typing import Any

_HTTP_BAD_REQUEST = 400
_DEFAULT_PORT = 8080
_EXIT_USAGE = 2


def _int_field(data: dict[str, Any], name: str) -> int | None:
    """Return ``data[name]`` if it is a real integer, else None."""
    value = data.get(name)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def create_app(config: TableConfig | None = None) -> Flask:
    """Create and configure the Flask application.

    The table starts reset (a lone root), as if selection 1 had been
    made.  Selecting QUIT tears the table down; a later selection 1
    brings it back.

    Args:
        config: Table settings.  Defaults are used if omitted.

    Returns:
        A configured Flask application ready to serve.

    """
    table = (config or TableConfig()).build()
    table.reset()
    menu = Menu(table=table)

    app = Flask(__name__)

    @app.route("/api/execute", methods=["POST"])
    def execute() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Run a menu selection.

        Expects JSON body: ``{"selection": 2, "pid": 0}``; ``pid`` is
        required for selections that prompt for one.

        Returns:
            JSON with ``output`` and ``quit`` fields.

        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Expected a JSON object"}), _HTTP_BAD_REQUEST

        selection = _int_field(data, "selection")
        if selection is None:
            return jsonify({"error": "Missing or invalid 'selection' field"}), _HTTP_BAD_REQUEST

        pid: int | None = None
        if menu.prompt_for(selection) is not None:
            pid = _int_field(data, "pid")
            if pid is None:
                return jsonify({"error": "Missing or invalid 'pid' field"}), _HTTP_BAD_REQUEST

        output = menu.execute(selection, pid)
        return jsonify({"output": output, "quit": selection == Selection.QUIT})

    @app.route("/api/status")
    def status() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the table summary for status polling."""
        return jsonify(
            {
                "processes": len(table),
                "capacity": table.capacity,
                "tree": format_tree(table),
            }
        )

    @app.route("/api/log")
    def log() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Return the table's events, oldest first.

        An optional ``?pid=N`` query keeps only the events about process N.

        Returns:
            JSON with an ``entries`` list of ``{kind, pid, level, message}``.

        """
        pid: int | None = None
        if "pid" in request.args:
            pid = request.args.get("pid", type=int)
            if pid is None:
                return jsonify({"error": "Invalid 'pid' parameter"}), _HTTP_BAD_REQUEST
        entries = table.logger.filter(pid=pid)
        return jsonify(
            {
                "entries": [
                    {
                        "kind": str(e.kind),
                        "pid": e.pid,
                        "level": e.level.name,
                        "message": e.message,
                    }
                    for e in entries
                ]
            }
        )

    return app


def main(argv: list[str] | None = None) -> int:
    """Run the web UI development server.

    This is the ``pcb-table-web`` console entry point.  It takes the same
    table options as ``pcb-table`` plus ``--port`` and ``--debug``.
    """
    parser = argparse.ArgumentParser(
        prog="pcb-table-web", description="Serve the process table menu over HTTP."
    )
    add_config_arguments(parser)
    parser.add_argument("--port", type=int, default=_DEFAULT_PORT, help="port to listen on")
    parser.add_argument("--debug", action="store_true", help="run Flask in debug mode")
    args = parser.parse_args(argv)
    try:
        config = resolve_config(args)
    except ConfigError as e:
        print(f"pcb-table-web: {e}", file=sys.stderr)  # noqa: T201
        return _EXIT_USAGE

    app = create_app(config)
    app.run(debug=args.debug, port=args.port)
    return 0
