"""Build pipeline: test, coverage report and publish tasks."""

from .tasks import (
    BuildSettings,
    BuildTaskError,
    PublishConfigError,
    Task,
    TaskCycleError,
    TaskGraph,
    UnknownTaskError,
    build_default_graph,
)

__all__ = [
    "BuildSettings",
    "BuildTaskError",
    "PublishConfigError",
    "Task",
    "TaskCycleError",
    "TaskGraph",
    "UnknownTaskError",
    "build_default_graph",
]
