"""
Unit tests for the CLI commands.
"""

import json
import threading
import time

from typer.testing import CliRunner

from authsession.cli import app
from authsession.stores.file import FileStore

runner = CliRunner()


class TestCLIRoot:
    def test_help_shows_commands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "config" in result.output
        assert "store" in result.output

    def test_config_command(self):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert "store_backend" in data
        assert "poll_interval" in data


class TestStoreShow:
    def test_empty(self, tmp_path):
        result = runner.invoke(app, ["store", "show", "--path", str(tmp_path / "s.json")])
        assert result.exit_code == 0
        assert "No session persisted" in result.output

    def test_hides_values_by_default(self, tmp_path):
        path = tmp_path / "s.json"
        FileStore(path).persist({"authenticator": "mock", "token": "s3cret"})

        result = runner.invoke(app, ["store", "show", "--path", str(path)])

        assert result.exit_code == 0
        assert "mock" in result.output
        assert "token" in result.output
        assert "s3cret" not in result.output

    def test_values(self, tmp_path):
        path = tmp_path / "s.json"
        FileStore(path).persist({"authenticator": "mock", "token": "s3cret"})

        result = runner.invoke(app, ["store", "show", "--path", str(path), "--values"])

        assert result.exit_code == 0
        assert "s3cret" in result.output

    def test_json(self, tmp_path):
        path = tmp_path / "s.json"
        FileStore(path).persist({"authenticator": "mock", "token": "abc"})

        result = runner.invoke(app, ["store", "show", "--path", str(path), "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {"authenticator": "mock", "token": "abc"}

    def test_record_without_authenticator(self, tmp_path):
        path = tmp_path / "s.json"
        FileStore(path).persist({"token": "abc"})

        result = runner.invoke(app, ["store", "show", "--path", str(path)])

        assert result.exit_code == 0
        assert "no valid authenticator" in result.output


class TestStoreClear:
    def test_clear_with_yes(self, tmp_path):
        path = tmp_path / "s.json"
        FileStore(path).persist({"authenticator": "mock", "token": "abc"})

        result = runner.invoke(app, ["store", "clear", "--path", str(path), "--yes"])

        assert result.exit_code == 0
        assert "Session cleared" in result.output
        assert not path.exists()

    def test_clear_aborted(self, tmp_path):
        path = tmp_path / "s.json"
        FileStore(path).persist({"authenticator": "mock", "token": "abc"})

        result = runner.invoke(app, ["store", "clear", "--path", str(path)], input="n\n")

        assert result.exit_code == 1
        assert path.exists()

    def test_clear_empty(self, tmp_path):
        result = runner.invoke(app, ["store", "clear", "--path", str(tmp_path / "s.json")])
        assert result.exit_code == 0
        assert "No session persisted" in result.output


class TestStoreWatch:
    def test_reports_external_change(self, tmp_path):
        path = tmp_path / "s.json"

        def write_later():
            time.sleep(0.3)
            FileStore(path).persist({"authenticator": "mock", "token": "abc"})

        writer = threading.Thread(target=write_later)
        writer.start()
        result = runner.invoke(
            app,
            ["store", "watch", "--path", str(path), "--count", "1", "--interval", "0.05"],
        )
        writer.join()

        assert result.exit_code == 0
        assert "Change #1" in result.output
        assert "mock" in result.output
