# tests/cli/test_storage_cli.py
"""Tests for the content-storage CLI."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    config_file = tmp_path / "settings.yaml"
    config_file.write_text(
        f"""
backend: filesystem
filesystem:
  root_path: "{tmp_path / 'contents'}"
logging:
  level: ERROR
"""
    )
    return config_file


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_version_flag(self) -> None:
        from content_storage.cli import app

        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "content-storage" in result.stdout.lower()

    def test_help_flag(self) -> None:
        from content_storage.cli import app

        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("put", "get", "info", "ls", "rm"):
            assert command in result.stdout

    def test_missing_settings_file(self, tmp_path: Path) -> None:
        from content_storage.cli import app

        result = runner.invoke(app, ["ls", "-s", str(tmp_path / "missing.yaml")])
        assert result.exit_code == 1
        assert "Settings file not found" in result.output

    def test_invalid_settings(self, tmp_path: Path) -> None:
        from content_storage.cli import app

        config_file = tmp_path / "settings.yaml"
        config_file.write_text("backend: s3\n")

        result = runner.invoke(app, ["ls", "-s", str(config_file)])
        assert result.exit_code == 1
        assert "Configuration errors" in result.output


class TestStorageCommands:
    """put / get / info / ls / rm against the filesystem backend."""

    def test_put_then_get(self, tmp_path: Path, settings_file: Path) -> None:
        from content_storage.cli import app

        source = tmp_path / "payload.bin"
        source.write_bytes(b"123")
        output = tmp_path / "out.bin"

        result = runner.invoke(app, ["put", "some-id", str(source), "-s", str(settings_file)])
        assert result.exit_code == 0, result.output
        assert "Stored some-id (3 bytes" in result.stdout

        result = runner.invoke(app, ["get", "some-id", "-s", str(settings_file), "-o", str(output)])
        assert result.exit_code == 0, result.output
        assert output.read_bytes() == b"123"

    def test_get_to_stdout(self, tmp_path: Path, settings_file: Path) -> None:
        from content_storage.cli import app

        source = tmp_path / "payload.txt"
        source.write_bytes(b"hello")
        runner.invoke(app, ["put", "some-id", str(source), "-s", str(settings_file)])

        result = runner.invoke(app, ["get", "some-id", "-s", str(settings_file)])
        assert result.exit_code == 0, result.output
        assert result.stdout == "hello"

    def test_put_compressed_and_info(self, tmp_path: Path, settings_file: Path) -> None:
        from content_storage.cli import app

        source = tmp_path / "zeros.bin"
        source.write_bytes(bytes(10000))

        result = runner.invoke(
            app, ["put", "some-id", str(source), "--compress", "-s", str(settings_file)]
        )
        assert result.exit_code == 0, result.output

        result = runner.invoke(app, ["info", "some-id", "-s", str(settings_file)])
        assert result.exit_code == 0, result.output
        assert "size: 45" in result.stdout
        assert "encoding: gzip" in result.stdout
        assert "compressed: yes" in result.stdout

    def test_get_raw_returns_stored_bytes(self, tmp_path: Path, settings_file: Path) -> None:
        import gzip

        from content_storage.cli import app

        source = tmp_path / "zeros.bin"
        source.write_bytes(bytes(10000))
        output = tmp_path / "raw.gz"
        runner.invoke(app, ["put", "some-id", str(source), "-c", "-s", str(settings_file)])

        result = runner.invoke(
            app, ["get", "some-id", "--raw", "-o", str(output), "-s", str(settings_file)]
        )
        assert result.exit_code == 0, result.output
        assert gzip.decompress(output.read_bytes()) == bytes(10000)

    def test_ls_with_prefix(self, tmp_path: Path, settings_file: Path) -> None:
        from content_storage.cli import app

        source = tmp_path / "payload.bin"
        source.write_bytes(b"123")
        for file_id in ("some-id", "another-id"):
            runner.invoke(app, ["put", file_id, str(source), "-s", str(settings_file)])

        result = runner.invoke(app, ["ls", "-s", str(settings_file), "--prefix", "an"])
        assert result.exit_code == 0, result.output
        assert result.stdout.split() == ["another-id"]

        result = runner.invoke(app, ["ls", "-s", str(settings_file)])
        assert sorted(result.stdout.split()) == ["another-id", "some-id"]

    def test_rm(self, tmp_path: Path, settings_file: Path) -> None:
        from content_storage.cli import app

        source = tmp_path / "payload.bin"
        source.write_bytes(b"123")
        runner.invoke(app, ["put", "some-id", str(source), "-s", str(settings_file)])

        result = runner.invoke(app, ["rm", "some-id", "-s", str(settings_file)])
        assert result.exit_code == 0, result.output

        result = runner.invoke(app, ["info", "some-id", "-s", str(settings_file)])
        assert result.exit_code == 1
        assert "Not found: some-id" in result.output

    def test_get_missing_id(self, settings_file: Path) -> None:
        from content_storage.cli import app

        result = runner.invoke(app, ["get", "non-existent-id", "-s", str(settings_file)])
        assert result.exit_code == 1
        assert "Not found" in result.output

    def test_put_missing_source(self, tmp_path: Path, settings_file: Path) -> None:
        from content_storage.cli import app

        result = runner.invoke(
            app, ["put", "some-id", str(tmp_path / "nope.bin"), "-s", str(settings_file)]
        )
        assert result.exit_code == 1
        assert "Source file not found" in result.output

    def test_put_rejects_traversal(self, tmp_path: Path, settings_file: Path) -> None:
        from content_storage.cli import app

        source = tmp_path / "payload.bin"
        source.write_bytes(b"123")

        result = runner.invoke(app, ["put", "../escaped", str(source), "-s", str(settings_file)])
        assert result.exit_code == 1
        assert "outside of storage root" in result.output
