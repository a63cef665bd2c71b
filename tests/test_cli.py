"""
CLI interface tests for amd-detective.
Tests the command-line interface and main entry points.
"""

import json

from click.testing import CliRunner

from amd_detective.main import cli


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_help(self):
        """Test CLI help message."""
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "amd detective" in result.output.lower()

    def test_cli_without_command_shows_help(self):
        """Test that a bare invocation prints usage."""
        runner = CliRunner()
        result = runner.invoke(cli, [])

        assert result.exit_code == 0
        assert "extract" in result.output

    def test_cli_version(self):
        """Test CLI version display."""
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "1.0.0" in result.output

    def test_info_command(self):
        """Test the info command."""
        runner = CliRunner()
        result = runner.invoke(cli, ["info"])

        assert result.exit_code == 0
        assert "AMD Detective" in result.output
        assert "nodeps" in result.output


class TestExtractCommand:
    """Test the extract command functionality."""

    def test_extract_console_output(self, sample_deps_module):
        """Test extracting a module with the default console report."""
        runner = CliRunner()
        result = runner.invoke(cli, ["extract", str(sample_deps_module)])

        assert result.exit_code == 0
        assert "jquery" in result.output
        assert "./lazy" in result.output

    def test_extract_quiet_output(self, sample_deps_module):
        """Test that quiet mode prints one dependency per line."""
        runner = CliRunner()
        result = runner.invoke(cli, ["extract", "-q", str(sample_deps_module)])

        assert result.exit_code == 0
        assert result.output.splitlines() == ["jquery", "./util", "./lazy"]

    def test_extract_skip_lazy_loaded(self, sample_deps_module):
        """Test the --skip-lazy-loaded flag."""
        runner = CliRunner()
        result = runner.invoke(
            cli, ["extract", "-q", "--skip-lazy-loaded", str(sample_deps_module)]
        )

        assert result.exit_code == 0
        assert result.output.splitlines() == ["jquery", "./util"]

    def test_include_lazy_loaded_overrides_environment(
        self, sample_deps_module, monkeypatch
    ):
        """Test that the command line flag wins over the environment."""
        monkeypatch.setenv("AMD_DETECTIVE_SKIP_LAZY_LOADED", "true")
        runner = CliRunner()
        result = runner.invoke(
            cli, ["extract", "-q", "--include-lazy-loaded", str(sample_deps_module)]
        )

        assert result.exit_code == 0
        assert "./lazy" in result.output.splitlines()

    def test_extract_multiple_files(self, sample_deps_module, sample_rem_module):
        """Test extracting several files at once."""
        runner = CliRunner()
        result = runner.invoke(
            cli, ["extract", "-q", str(sample_deps_module), str(sample_rem_module)]
        )

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "jquery",
            "./util",
            "./lazy",
            "events",
            "./util",
        ]

    def test_extract_nonexistent_file(self):
        """Test extracting a file that doesn't exist."""
        runner = CliRunner()
        result = runner.invoke(cli, ["extract", "nonexistent.js"])

        assert result.exit_code != 0

    def test_extract_broken_file(self, sample_broken_module, sample_deps_module):
        """Test that a parse failure sets a failing exit code."""
        runner = CliRunner()
        result = runner.invoke(
            cli, ["extract", str(sample_broken_module), str(sample_deps_module)]
        )

        assert result.exit_code == 1
        assert "jquery" in result.output
        assert "Errors" in result.output


class TestOutputFormats:
    """Test different output formats."""

    def test_json_output_format(self, sample_deps_module):
        """Test JSON output on stdout."""
        runner = CliRunner()
        result = runner.invoke(
            cli, ["extract", "--output-format", "json", str(sample_deps_module)]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["files"][0]["dependencies"] == ["jquery", "./util", "./lazy"]
        assert data["total_dependencies"] == 3
        assert "errors" not in data

    def test_json_output_file(self, sample_deps_module, tmp_path):
        """Test saving JSON results to a file."""
        output_file = tmp_path / "results.json"
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "extract",
                "--output-format",
                "json",
                "-o",
                str(output_file),
                str(sample_deps_module),
            ],
        )

        assert result.exit_code == 0
        data = json.loads(output_file.read_text())
        assert data["unique_dependencies"] == ["jquery", "./util", "./lazy"]

    def test_output_file_requires_json(self, sample_deps_module, tmp_path):
        """Test that -o is rejected for console output."""
        runner = CliRunner()
        result = runner.invoke(
            cli, ["extract", "-o", str(tmp_path / "out.json"), str(sample_deps_module)]
        )

        assert result.exit_code != 0
        assert "JSON format" in result.output

    def test_output_format_from_environment(self, sample_rem_module, monkeypatch):
        """Test AMD_DETECTIVE_OUTPUT_FORMAT."""
        monkeypatch.setenv("AMD_DETECTIVE_OUTPUT_FORMAT", "json")
        runner = CliRunner()
        result = runner.invoke(cli, ["extract", str(sample_rem_module)])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["files"][0]["dependencies"] == [
            "events",
            "./util",
        ]

    def test_invalid_output_format(self, sample_deps_module):
        """Test invalid output format."""
        runner = CliRunner()
        result = runner.invoke(
            cli, ["extract", "--output-format", "xml", str(sample_deps_module)]
        )

        assert result.exit_code != 0


class TestConfigCommands:
    """Test configuration management commands."""

    def test_config_init(self):
        """Test config init command."""
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "init"])

        assert result.exit_code == 0
        with open(".amd-detective.json", encoding="utf-8") as f:
            data = json.load(f)
        assert data["extract"]["skip_lazy_loaded"] is False

    def test_config_init_existing_file(self):
        """Test that config init does not overwrite without --force."""
        with open(".amd-detective.json", "w", encoding="utf-8") as f:
            f.write("{}")

        runner = CliRunner()
        result = runner.invoke(cli, ["config", "init"])

        assert result.exit_code == 0
        assert "already exists" in result.output
        with open(".amd-detective.json", encoding="utf-8") as f:
            assert f.read() == "{}"

    def test_config_show(self):
        """Test config show command."""
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 0
        assert "Skip Lazy Loaded" in result.output

    def test_config_validate_valid_file(self, tmp_path):
        """Test config validate with valid file."""
        config_file = tmp_path / "valid.json"
        config_file.write_text(json.dumps({"extract": {"skip_lazy_loaded": True}}))

        runner = CliRunner()
        result = runner.invoke(cli, ["config", "validate", str(config_file)])

        assert result.exit_code == 0
        assert "valid" in result.output

    def test_config_validate_invalid_file(self, tmp_path):
        """Test config validate with invalid values."""
        config_file = tmp_path / "invalid.json"
        config_file.write_text(json.dumps({"output": {"output_format": "xml"}}))

        runner = CliRunner()
        result = runner.invoke(cli, ["config", "validate", str(config_file)])

        assert result.exit_code == 1
        assert "validation failed" in result.output

    def test_config_file_option(self, sample_deps_module, tmp_path):
        """Test loading settings with --config-file."""
        config_file = tmp_path / "settings.json"
        config_file.write_text(json.dumps({"extract": {"skip_lazy_loaded": True}}))

        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["--config-file", str(config_file), "extract", "-q", str(sample_deps_module)],
        )

        assert result.exit_code == 0
        assert result.output.splitlines() == ["jquery", "./util"]

    def test_config_validate_wrong_type(self, tmp_path):
        """Test that a value of the wrong type is reported, not raised."""
        config_file = tmp_path / "wrong_type.json"
        config_file.write_text(json.dumps({"security": {"max_file_size_mb": "big"}}))

        runner = CliRunner()
        result = runner.invoke(cli, ["config", "validate", str(config_file)])

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "max_file_size_mb must be an integer" in result.output

    def test_config_file_with_wrong_type_uses_default(
        self, sample_deps_module, tmp_path
    ):
        """Test that extraction still runs when a setting has the wrong type."""
        config_file = tmp_path / "wrong_type.json"
        config_file.write_text(json.dumps({"security": {"max_file_size_mb": "big"}}))

        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["--config-file", str(config_file), "extract", "-q", str(sample_deps_module)],
        )

        assert result.exit_code == 0
        assert "jquery" in result.output.splitlines()
