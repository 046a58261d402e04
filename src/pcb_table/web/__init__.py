"""Browser-facing web API for the process table.

This package provides a Flask application that exposes the menu over
HTTP.  It is an **optional** extra — install with::

    pip install pcb-table[web]

The ``create_app`` factory in ``app.py`` builds a table and serves:

- ``POST /api/execute`` — run a menu selection and return JSON.
- ``GET /api/status`` — table summary for live polling.
- ``GET /api/log`` — the table's event log.
"""
