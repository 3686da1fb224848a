import logging
import subprocess

import click

from practice_starter.app.core.logging_config import configure_logging
from practice_starter.build.tasks import (
    COVERAGE_REPORT,
    PUBLISH,
    TEST,
    BuildError,
    build_default_graph,
)

log = logging.getLogger(__name__)


@click.group()
@click.option("--log-level", default="INFO", help="Logging level.")
def cli(log_level: str):
    """Management script for the practice starter application."""
    configure_logging(log_level)


def run_alembic(args: list[str], action: str) -> None:
    """
    Run an alembic command as a subprocess.

    Args:
        args (list[str]): Arguments passed to `alembic`.
        action (str): What the command does, for error messages.

    Raises:
        click.ClickException: If alembic is missing or exits with an error;
            the command then exits with a non-zero status.

    """
    command = ["alembic", *args]
    _msg = f"Running {' '.join(command)}"
    log.debug(_msg)
    try:
        subprocess.run(command, check=True)
    except subprocess.CalledProcessError as e:
        _error_msg = f"An error occurred while {action}: {e}"
        log.exception(_error_msg)
        raise click.ClickException(_error_msg) from e
    except FileNotFoundError as e:
        _error_msg = "'alembic' command not found. Make sure Alembic is installed and in your PATH."
        log.exception(_error_msg)
        raise click.ClickException(_error_msg) from e


@cli.command("generate-migration")
@click.option(
    "-m",
    "--message",
    required=True,
    help="A short message describing the migration.",
)
def generate_migration(message: str):
    """
    Generate a new database migration script.

    This command wraps 'alembic revision --autogenerate'.

    Args:
        message (str): A short message describing the migration.

    """
    click.echo("Generating new migration...")
    run_alembic(["revision", "--autogenerate", "-m", message], "generating migration")
    _success_msg = f"Successfully generated new migration: {message}"
    click.echo(_success_msg)
    log.info(_success_msg)


@cli.command("apply-migrations")
def apply_migrations():
    """
    Apply all pending migrations to the database.

    This command wraps 'alembic upgrade head'.
    """
    click.echo("Applying database migrations...")
    run_alembic(["upgrade", "head"], "applying migrations")
    _success_msg = "Successfully applied all migrations."
    click.echo(_success_msg)
    log.info(_success_msg)


def run_build_tasks(task_name: str, dry_run: bool) -> None:
    """
    Run a build task with its dependencies and finalizers.

    Args:
        task_name (str): The task requested on the command line.
        dry_run (bool): Only print the planned order.

    Raises:
        click.ClickException: If a task fails; the exit code is non-zero.

    """
    graph = build_default_graph()
    try:
        if dry_run:
            for name in graph.plan([task_name]):
                click.echo(f":{name}")
            return
        executed = graph.run([task_name])
    except BuildError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"BUILD SUCCESSFUL: {', '.join(executed)}")


@cli.command("test")
@click.option("--dry-run", is_flag=True, help="Print the tasks without running them.")
def test(dry_run: bool):
    """Run the tests; the coverage report always follows."""
    run_build_tasks(TEST, dry_run)


@cli.command("coverage-report")
@click.option("--dry-run", is_flag=True, help="Print the tasks without running them.")
def coverage_report(dry_run: bool):
    """Write the XML and HTML coverage reports, running the tests first."""
    run_build_tasks(COVERAGE_REPORT, dry_run)


@cli.command("publish")
@click.option("--dry-run", is_flag=True, help="Print the tasks without running them.")
def publish(dry_run: bool):
    """Test, report coverage, then build and upload the distributions."""
    run_build_tasks(PUBLISH, dry_run)


def main():
    """Run the command line interface."""
    cli()


if __name__ == "__main__":
    main()
