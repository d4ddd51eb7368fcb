"""Integration tests for the command line interface."""

import httpx
import pytest
from typer.testing import CliRunner

from imgconv import __version__
from imgconv.cli import main as cli_main
from imgconv.services.submission_service import UploadClient

runner = CliRunner()


@pytest.fixture
def png_path(tmp_path, png_bytes):
    path = tmp_path / "holiday.png"
    path.write_bytes(png_bytes)
    return path


def test_version():
    result = runner.invoke(cli_main.app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_convert_writes_output(png_path, tmp_path):
    out_dir = tmp_path / "out"

    result = runner.invoke(
        cli_main.app,
        ["convert", str(png_path), "-f", "webp", "-q", "0.8", "-o", str(out_dir)],
    )

    assert result.exit_code == 0, result.output
    written = list(out_dir.glob("holiday-*.webp"))
    assert len(written) == 1
    assert written[0].read_bytes()[:4] == b"RIFF"


def test_convert_rejected_file(tmp_path):
    text_file = tmp_path / "notes.png"
    text_file.write_bytes(b"this is not an image")

    result = runner.invoke(
        cli_main.app, ["convert", str(text_file), "-o", str(tmp_path / "out")]
    )

    assert result.exit_code == 1
    assert "No files were converted" in result.output


def test_convert_unknown_format(png_path):
    result = runner.invoke(cli_main.app, ["convert", str(png_path), "-f", "bmp"])

    assert result.exit_code == 2
    assert "unsupported format" in result.output


def test_convert_and_upload(png_path, monkeypatch):
    def handler(request):
        return httpx.Response(200, json=[{"success": "sent uploaded successfully!"}])

    monkeypatch.setattr(
        cli_main,
        "UploadClient",
        lambda url: UploadClient(url=url, transport=httpx.MockTransport(handler)),
    )

    result = runner.invoke(
        cli_main.app,
        ["convert", str(png_path), "-f", "jpeg", "--upload", "http://upload.test/upload"],
    )

    assert result.exit_code == 0, result.output
    assert "sent uploaded successfully!" in result.output
