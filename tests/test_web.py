"""Tests for the web API.

The web UI exposes the menu over HTTP.  Tests use
``pytest.importorskip`` so they are skipped when Flask is missing.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

flask = pytest.importorskip("flask")

from pcb_table.config import TableConfig  # noqa: E402
from pcb_table.web.app import create_app, main  # noqa: E402

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
SMALL_CAPACITY = 2
CUSTOM_PORT = 5050
EXIT_USAGE = 2


def _create_client(config: TableConfig | None = None) -> Any:
    """Create a test client from a fresh app."""
    app = create_app(config)
    app.config["TESTING"] = True
    return app.test_client()


class TestAppCreation:
    """Verify the app factory."""

    def test_create_app_returns_flask(self) -> None:
        """create_app should return a Flask application."""
        assert isinstance(create_app(), flask.Flask)

    def test_starts_with_root(self) -> None:
        """The table is reset when the app is built."""
        data = _create_client().get("/api/status").get_json()
        assert data["processes"] == 1
        assert data["tree"] == "└── pid 0"


class TestExecuteEndpoint:
    """Verify POST /api/execute."""

    def test_create_child(self) -> None:
        """Selection 2 with a pid creates a child and returns the listing."""
        client = _create_client()
        response = client.post("/api/execute", json={"selection": 2, "pid": 0})
        assert response.status_code == HTTP_OK
        data = response.get_json()
        assert "Child process: 1" in data["output"]
        assert data["quit"] is False

    def test_ignored_request_returns_empty_output(self) -> None:
        """A full table yields empty output."""
        client = _create_client(TableConfig(capacity=SMALL_CAPACITY))
        client.post("/api/execute", json={"selection": 2, "pid": 0})
        data = client.post("/api/execute", json={"selection": 2, "pid": 0}).get_json()
        assert data["output"] == ""

    def test_destroy(self) -> None:
        """Selection 3 frees the subtree."""
        client = _create_client()
        client.post("/api/execute", json={"selection": 2, "pid": 0})
        client.post("/api/execute", json={"selection": 3, "pid": 0})
        assert client.get("/api/status").get_json()["processes"] == 1

    def test_quit(self) -> None:
        """Selection 4 tears the table down and reports quit."""
        client = _create_client()
        data = client.post("/api/execute", json={"selection": 4}).get_json()
        assert data["quit"] is True
        assert client.get("/api/status").get_json()["processes"] == 0

    def test_missing_selection(self) -> None:
        """A body without a selection is rejected."""
        response = _create_client().post("/api/execute", json={"pid": 0})
        assert response.status_code == HTTP_BAD_REQUEST
        assert "selection" in response.get_json()["error"]

    def test_missing_pid(self) -> None:
        """Selections that need a pid reject a body without one."""
        response = _create_client().post("/api/execute", json={"selection": 2})
        assert response.status_code == HTTP_BAD_REQUEST
        assert "pid" in response.get_json()["error"]

    def test_non_integer_pid(self) -> None:
        """A pid must be an integer."""
        response = _create_client().post("/api/execute", json={"selection": 3, "pid": "0"})
        assert response.status_code == HTTP_BAD_REQUEST

    def test_non_json_body(self) -> None:
        """A non-JSON body is rejected."""
        response = _create_client().post("/api/execute", data="2", content_type="text/plain")
        assert response.status_code == HTTP_BAD_REQUEST


class TestLogEndpoint:
    """Verify GET /api/log."""

    def test_log_lists_events(self) -> None:
        """The log shows the reset and later operations as structured entries."""
        client = _create_client()
        client.post("/api/execute", json={"selection": 2, "pid": 0})
        entries = client.get("/api/log").get_json()["entries"]
        assert entries[0] == {
            "kind": "reset",
            "pid": 0,
            "level": "INFO",
            "message": "Process table reset (root pid 0)",
        }
        assert entries[-1] == {
            "kind": "create",
            "pid": 1,
            "level": "INFO",
            "message": "Created process 1 (parent 0)",
        }

    def test_filter_by_pid(self) -> None:
        """``?pid=N`` keeps only the events about process N."""
        client = _create_client()
        client.post("/api/execute", json={"selection": 2, "pid": 0})
        client.post("/api/execute", json={"selection": 2, "pid": 0})
        entries = client.get("/api/log?pid=1").get_json()["entries"]
        assert [(e["kind"], e["pid"]) for e in entries] == [("create", 1)]

    def test_ignored_request_logged_as_warning(self) -> None:
        """An ignored request shows up as a WARNING about the requested pid."""
        client = _create_client()
        client.post("/api/execute", json={"selection": 3, "pid": 7})
        entries = client.get("/api/log?pid=7").get_json()["entries"]
        assert [(e["kind"], e["level"]) for e in entries] == [("ignored", "WARNING")]

    def test_invalid_pid(self) -> None:
        """A non-integer pid query is rejected."""
        response = _create_client().get("/api/log?pid=abc")
        assert response.status_code == HTTP_BAD_REQUEST
        assert "pid" in response.get_json()["error"]


class TestMain:
    """Verify the ``pcb-table-web`` entry point."""

    @pytest.fixture
    def runs(self, monkeypatch: pytest.MonkeyPatch) -> list[tuple[flask.Flask, dict[str, Any]]]:
        """Capture Flask.run calls instead of starting a server."""
        calls: list[tuple[flask.Flask, dict[str, Any]]] = []

        def _fake_run(app: flask.Flask, **kwargs: Any) -> None:
            calls.append((app, kwargs))

        monkeypatch.setattr(flask.Flask, "run", _fake_run)
        return calls

    def test_defaults(self, runs: list[tuple[flask.Flask, dict[str, Any]]]) -> None:
        """Without options the server runs on port 8080 without debug."""
        default_port = 8080
        assert main([]) == 0
        (_, kwargs) = runs[0]
        assert kwargs == {"debug": False, "port": default_port}

    def test_options(self, runs: list[tuple[flask.Flask, dict[str, Any]]]) -> None:
        """--capacity sizes the table; --port and --debug reach Flask."""
        argv = ["--capacity", str(SMALL_CAPACITY), "--port", str(CUSTOM_PORT), "--debug"]
        assert main(argv) == 0
        (app, kwargs) = runs[0]
        assert kwargs == {"debug": True, "port": CUSTOM_PORT}
        status = app.test_client().get("/api/status").get_json()
        assert status["capacity"] == SMALL_CAPACITY

    def test_bad_capacity_exits_with_usage(
        self,
        runs: list[tuple[flask.Flask, dict[str, Any]]],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """An unusable capacity exits with status 2 before serving."""
        assert main(["--capacity", "0"]) == EXIT_USAGE
        assert runs == []
        assert "capacity" in capsys.readouterr().err

    def test_missing_config_exits_with_usage(
        self,
        tmp_path: Path,
        runs: list[tuple[flask.Flask, dict[str, Any]]],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """A config file that cannot be read exits with status 2."""
        assert main(["--config", str(tmp_path / "missing.json")]) == EXIT_USAGE
        assert runs == []
        assert "Cannot load config" in capsys.readouterr().err
