import logging
import subprocess
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from manage import cli, main
from practice_starter.build.tasks import (
    COVERAGE_REPORT,
    PUBLISH,
    TEST,
    BuildTaskError,
    PublishConfigError,
)

log = logging.getLogger(__name__)


def test_generate_migration_success():
    """Test the generate-migration command successfully generates a migration."""
    runner = CliRunner()
    with patch("subprocess.run") as mock_run:
        result = runner.invoke(cli, ["generate-migration", "-m", "add users"])
        assert result.exit_code == 0
        assert "Generating new migration..." in result.output
        assert "Successfully generated new migration: add users" in result.output
        mock_run.assert_called_once_with(
            ["alembic", "revision", "--autogenerate", "-m", "add users"], check=True
        )


def test_generate_migration_called_process_error():
    """Test the generate-migration command handles CalledProcessError."""
    runner = CliRunner()
    with patch("subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.CalledProcessError(1, "cmd")
        result = runner.invoke(cli, ["generate-migration", "-m", "add users"])
        assert result.exit_code == 1
        assert "An error occurred while generating migration:" in result.output
        assert "Successfully generated" not in result.output


def test_generate_migration_file_not_found_error():
    """Test the generate-migration command handles FileNotFoundError."""
    runner = CliRunner()
    with patch("subprocess.run") as mock_run:
        mock_run.side_effect = FileNotFoundError
        result = runner.invoke(cli, ["generate-migration", "-m", "add users"])
        assert result.exit_code == 1
        assert "Error: 'alembic' command not found." in result.output


def test_generate_migration_missing_message():
    """Test the generate-migration command fails if the message is missing."""
    runner = CliRunner()
    result = runner.invoke(cli, ["generate-migration"])
    assert result.exit_code != 0
    assert "Missing option" in result.output


def test_apply_migrations_success():
    """Test the apply-migrations command successfully applies migrations."""
    runner = CliRunner()
    with patch("subprocess.run") as mock_run:
        result = runner.invoke(cli, ["apply-migrations"])
        assert result.exit_code == 0
        assert "Applying database migrations..." in result.output
        assert "Successfully applied all migrations." in result.output
        mock_run.assert_called_once_with(["alembic", "upgrade", "head"], check=True)


def test_apply_migrations_called_process_error():
    """Test the apply-migrations command handles CalledProcessError."""
    runner = CliRunner()
    with patch("subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.CalledProcessError(1, "cmd")
        result = runner.invoke(cli, ["apply-migrations"])
        assert result.exit_code == 1
        assert "An error occurred while applying migrations:" in result.output
        assert "Successfully applied" not in result.output


def test_apply_migrations_file_not_found_error():
    """Test the apply-migrations command handles FileNotFoundError."""
    runner = CliRunner()
    with patch("subprocess.run") as mock_run:
        mock_run.side_effect = FileNotFoundError
        result = runner.invoke(cli, ["apply-migrations"])
        assert result.exit_code == 1
        assert "Error: 'alembic' command not found." in result.output


@patch("manage.build_default_graph")
def test_test_command_runs_test_task(mock_build_default_graph):
    """Test the test command runs the test task and reports success."""
    mock_graph = MagicMock()
    mock_graph.run.return_value = [TEST, COVERAGE_REPORT]
    mock_build_default_graph.return_value = mock_graph

    result = CliRunner().invoke(cli, ["test"])

    assert result.exit_code == 0
    mock_graph.run.assert_called_once_with([TEST])
    assert "BUILD SUCCESSFUL: test, coverageReport" in result.output


@patch("manage.build_default_graph")
def test_coverage_report_command(mock_build_default_graph):
    mock_graph = MagicMock()
    mock_graph.run.return_value = [TEST, COVERAGE_REPORT]
    mock_build_default_graph.return_value = mock_graph

    result = CliRunner().invoke(cli, ["coverage-report"])

    assert result.exit_code == 0
    mock_graph.run.assert_called_once_with([COVERAGE_REPORT])


@patch("manage.build_default_graph")
def test_publish_command_failure_exits_non_zero(mock_build_default_graph):
    """Test a failing build task makes the command exit with an error."""
    mock_graph = MagicMock()
    mock_graph.run.side_effect = BuildTaskError(TEST, ["pytest"], 1)
    mock_build_default_graph.return_value = mock_graph

    result = CliRunner().invoke(cli, ["publish"])

    assert result.exit_code == 1
    mock_graph.run.assert_called_once_with([PUBLISH])
    assert "Task 'test' failed" in result.output


@patch("manage.build_default_graph")
def test_publish_command_missing_credentials(mock_build_default_graph):
    mock_graph = MagicMock()
    mock_graph.run.side_effect = PublishConfigError("GITHUB_TOKEN must be set")
    mock_build_default_graph.return_value = mock_graph

    result = CliRunner().invoke(cli, ["publish"])

    assert result.exit_code == 1
    assert "GITHUB_TOKEN must be set" in result.output


def test_publish_dry_run_prints_plan():
    """Test the dry run lists the tasks in execution order without running them."""
    with patch("practice_starter.build.tasks.run_command") as mock_run_command:
        result = CliRunner().invoke(cli, ["publish", "--dry-run"])

    assert result.exit_code == 0
    assert result.output.splitlines() == [":test", ":coverageReport", ":publish"]
    mock_run_command.assert_not_called()


def test_main():
    """Test the main function calls the cli."""
    with patch("manage.cli") as mock_cli:
        main()
        mock_cli.assert_called_once()
