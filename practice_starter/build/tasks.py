"""Build pipeline tasks and their ordering.

Three tasks make up the pipeline:

    test            runs the test suite while collecting coverage,
                    finalized by coverageReport
    coverageReport  depends on test; writes the XML and HTML reports
    publish         depends on test and coverageReport; builds the sdist and
                    wheel into a fresh directory and uploads them with twine

A task's dependencies run before it, its finalizers run after it, even when it
fails. Every tool is an external command; a non-zero exit code stops the run
with a `BuildTaskError`. Nothing is retried.
"""

import glob
import logging
import os
import subprocess
import sys
import tempfile
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)

TEST = "test"
COVERAGE_REPORT = "coverageReport"
PUBLISH = "publish"


class BuildError(Exception):
    """Base class for build pipeline failures."""


class UnknownTaskError(BuildError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Task '{name}' not found")


class TaskCycleError(BuildError):
    def __init__(self, path: Sequence[str]):
        self.path = list(path)
        super().__init__(f"Circular dependency between tasks: {' -> '.join(path)}")


class BuildTaskError(BuildError):
    """An external command of a task exited with a non-zero status."""

    def __init__(self, task: str, command: Sequence[str], returncode: int):
        self.task = task
        self.command = list(command)
        self.returncode = returncode
        super().__init__(
            f"Task '{task}' failed: '{' '.join(command)}' exited with {returncode}",
        )


class PublishConfigError(BuildError):
    """Publishing was requested without the registry credentials."""


class CoverageReports(BaseModel):
    """Which coverage report formats are produced."""

    xml: bool = True
    csv: bool = False
    html: bool = True


class BuildSettings(BaseSettings):
    """
    Build settings read from the environment.

    Attributes:
        project_version (str | None): Version override, also picked up by the
            package metadata through `practice_starter.__version__`.
        source_package (str): Package measured by coverage.
        github_repository (str): `owner/name` of the source repository.
        github_actor (str | None): Registry user name, `__token__` for an
            API token on PyPI.
        github_token (str | None): Registry password or token. Handed to twine
            through its environment, never on the command line.
        publish_url_template (str): Upload URL of a Python package index,
            `{repository}` is replaced with `github_repository`. Defaults to
            the PyPI upload endpoint.
        coverage_reports (CoverageReports): Enabled coverage report formats.

    """

    model_config = SettingsConfigDict(case_sensitive=True, extra="ignore")

    project_version: str | None = Field(default=None, validation_alias="PROJECT_VERSION")
    source_package: str = "practice_starter"
    github_repository: str = Field(
        default="OWNER/REPO",
        validation_alias="GITHUB_REPOSITORY",
    )
    github_actor: str | None = Field(default=None, validation_alias="GITHUB_ACTOR")
    github_token: str | None = Field(default=None, validation_alias="GITHUB_TOKEN")
    publish_url_template: str = Field(
        default="https://upload.pypi.org/legacy/",
        validation_alias="PUBLISH_URL_TEMPLATE",
    )
    coverage_reports: CoverageReports = CoverageReports()

    @property
    def publish_url(self) -> str:
        return self.publish_url_template.format(repository=self.github_repository)


@dataclass
class Task:
    """A named step of the pipeline.

    Attributes:
        name (str): Unique task name.
        action (Callable[[], None]): Work performed by the task.
        depends_on (list[str]): Tasks that must complete before this one.
        finalized_by (list[str]): Tasks that run after this one, even on failure.

    """

    name: str
    action: Callable[[], None]
    depends_on: list[str] = field(default_factory=list)
    finalized_by: list[str] = field(default_factory=list)


class TaskGraph:
    """Registry of tasks able to order and run them."""

    def __init__(self, tasks: Iterable[Task] = ()):
        self._tasks: dict[str, Task] = {}
        for task in tasks:
            self.register(task)

    def register(self, task: Task) -> Task:
        self._tasks[task.name] = task
        return task

    def get(self, name: str) -> Task:
        try:
            return self._tasks[name]
        except KeyError:
            raise UnknownTaskError(name) from None

    @property
    def names(self) -> list[str]:
        return list(self._tasks)

    def plan(self, requested: Sequence[str]) -> list[str]:
        """Return the execution order for the requested tasks.

        Args:
            requested (Sequence[str]): Task names, in the order asked for.

        Returns:
            list[str]: Every task to run, each once, dependencies first.

        Raises:
            UnknownTaskError: If a requested or referenced task is not registered.
            TaskCycleError: If dependencies form a cycle.

        Notes:
            1. Walk dependencies depth first and append a task after them.
            2. After a task, schedule its finalizers; a finalizer's own
               dependencies are scheduled before it as usual.
            3. A finalizer that another planned task depends on is already
               placed by that dependency and is not repeated.

        """
        order: list[str] = []
        placed: set[str] = set()

        def visit(name: str, path: list[str]) -> None:
            if name in placed:
                return
            if name in path:
                raise TaskCycleError([*path[path.index(name) :], name])
            task = self.get(name)
            for dependency in task.depends_on:
                visit(dependency, [*path, name])
            if name in placed:
                return
            order.append(name)
            placed.add(name)
            for finalizer in task.finalized_by:
                visit(finalizer, [])

        for name in requested:
            visit(name, [])

        _msg = f"Planned tasks {list(requested)}: {order}"
        log.debug(_msg)
        return order

    def run(self, requested: Sequence[str]) -> list[str]:
        """Run the requested tasks in plan order.

        Args:
            requested (Sequence[str]): Task names to run.

        Returns:
            list[str]: The names of the tasks that ran.

        Raises:
            BuildError: The first failure, after the finalizers of the tasks
                that already started have run.

        """
        plan = self.plan(requested)
        executed: list[str] = []
        pending_finalizers: list[str] = []
        failure: BaseException | None = None

        for name in plan:
            if failure is not None and name not in pending_finalizers:
                continue
            task = self.get(name)
            _msg = f"> Task :{name}"
            log.info(_msg)
            executed.append(name)
            pending_finalizers.extend(task.finalized_by)
            try:
                task.action()
            except BuildError as e:
                _msg = f"Task {name} failed: {e}"
                log.error(_msg)
                if failure is None:
                    failure = e

        if failure is not None:
            raise failure
        return executed


def run_command(
    task: str,
    command: Sequence[str],
    env: Mapping[str, str] | None = None,
) -> None:
    """Run an external command, raising `BuildTaskError` on a non-zero exit.

    Args:
        task (str): Task the command belongs to, for error reporting.
        command (Sequence[str]): Program and arguments. Logged as is, so it
            must not carry secrets; pass those through `env`.
        env (Mapping[str, str] | None): Full environment of the child process;
            the current environment when None. Never logged.

    """
    _msg = f"Running command: {' '.join(command)}"
    log.info(_msg)
    try:
        result = subprocess.run(
            list(command),
            check=False,
            env=dict(env) if env is not None else None,
        )
    except FileNotFoundError as e:
        raise BuildTaskError(task, command, 127) from e
    if result.returncode != 0:
        raise BuildTaskError(task, command, result.returncode)


def pytest_command(settings: BuildSettings) -> list[str]:
    return [
        sys.executable,
        "-m",
        "pytest",
        f"--cov={settings.source_package}",
        "--cov-branch",
        "--cov-report=",
    ]


def coverage_report_commands(settings: BuildSettings) -> list[list[str]]:
    """Commands writing the enabled coverage reports.

    coverage.py has no CSV writer, so the csv flag never adds a command.
    """
    reports = settings.coverage_reports
    commands = []
    if reports.xml:
        commands.append([sys.executable, "-m", "coverage", "xml"])
    if reports.html:
        commands.append([sys.executable, "-m", "coverage", "html"])
    if reports.csv:
        _msg = "CSV coverage reports are not supported by coverage.py; skipping"
        log.warning(_msg)
    return commands


def check_publish_credentials(settings: BuildSettings) -> None:
    """Raise `PublishConfigError` if the registry user or token is missing."""
    if not settings.github_actor or not settings.github_token:
        raise PublishConfigError(
            "GITHUB_ACTOR and GITHUB_TOKEN must be set to publish "
            f"to {settings.publish_url}",
        )


def build_command(outdir: str) -> list[str]:
    return [sys.executable, "-m", "build", "--sdist", "--wheel", "--outdir", outdir]


def upload_command(settings: BuildSettings, files: Sequence[str]) -> list[str]:
    return [
        sys.executable,
        "-m",
        "twine",
        "upload",
        "--non-interactive",
        "--repository-url",
        settings.publish_url,
        *files,
    ]


def upload_env(settings: BuildSettings) -> dict[str, str]:
    """The current environment plus the twine credentials."""
    return {
        **os.environ,
        "TWINE_USERNAME": settings.github_actor,
        "TWINE_PASSWORD": settings.github_token,
    }


def build_default_graph(settings: BuildSettings | None = None) -> TaskGraph:
    """Create the test, coverageReport and publish tasks.

    Args:
        settings (BuildSettings | None): Build settings; read from the
            environment when None.

    Returns:
        TaskGraph: The wired pipeline.

    Notes:
        1. `publish` checks the credentials before building anything.
        2. The distributions are built into a temporary directory, so only
           the files of this build are uploaded, whatever `dist/` holds.

    """
    settings = settings or BuildSettings()

    def run_tests() -> None:
        run_command(TEST, pytest_command(settings))

    def write_coverage_reports() -> None:
        for command in coverage_report_commands(settings):
            run_command(COVERAGE_REPORT, command)

    def publish() -> None:
        check_publish_credentials(settings)
        with tempfile.TemporaryDirectory(prefix="practice-dist-") as outdir:
            run_command(PUBLISH, build_command(outdir))
            files = sorted(glob.glob(os.path.join(outdir, "*")))
            _msg = f"Uploading {len(files)} distributions to {settings.publish_url}"
            log.info(_msg)
            run_command(
                PUBLISH,
                upload_command(settings, files),
                env=upload_env(settings),
            )

    return TaskGraph(
        [
            Task(TEST, run_tests, finalized_by=[COVERAGE_REPORT]),
            Task(COVERAGE_REPORT, write_coverage_reports, depends_on=[TEST]),
            Task(PUBLISH, publish, depends_on=[TEST, COVERAGE_REPORT]),
        ],
    )
