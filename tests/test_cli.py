"""Tests for the command-line interface."""

from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from pixelcheck.cli import cli
from pixelcheck.errors import NavigationFailedError
from pixelcheck.models.config import ComparisonConfig


class TestInit:

    def test_creates_config(self, tmp_path):
        config_path = tmp_path / "pixelcheck.json"
        result = CliRunner().invoke(cli, ["init", "--config", str(config_path)])

        assert result.exit_code == 0
        assert ComparisonConfig.load(config_path).render.max_height == 15000

    def test_keeps_existing_when_declined(self, tmp_path):
        config_path = tmp_path / "pixelcheck.json"
        config_path.write_text('{"output_dir": "mine"}')

        result = CliRunner().invoke(cli, ["init", "--config", str(config_path)], input="n\n")

        assert result.exit_code == 0
        assert ComparisonConfig.load(config_path).output_dir == "mine"


class TestCompare:

    def test_writes_report(self, tmp_path, white_png, sample_result):
        design = tmp_path / "mock.png"
        design.write_bytes(white_png)
        out_dir = tmp_path / "out"

        with patch("pixelcheck.cli.ComparisonPipeline.compare",
                   AsyncMock(return_value=sample_result)):
            result = CliRunner().invoke(cli, [
                "compare", "--url", "https://example.com/pricing", "--design", str(design),
                "--output-dir", str(out_dir), "--config", str(tmp_path / "none.json"),
            ])

        assert result.exit_code == 0, result.output
        assert "Comparison Summary" in result.output
        assert list(out_dir.glob("*/report.json"))

    def test_error_exit_code(self, tmp_path, white_png):
        design = tmp_path / "mock.png"
        design.write_bytes(white_png)

        with patch("pixelcheck.cli.ComparisonPipeline.compare",
                   AsyncMock(side_effect=NavigationFailedError("Connection refused."))):
            result = CliRunner().invoke(cli, [
                "compare", "--url", "http://localhost:1", "--design", str(design),
                "--config", str(tmp_path / "none.json"),
            ])

        assert result.exit_code == 1
        assert "Connection refused." in result.output
