"""Run context for structured logging.

A join run is tagged with a short run id and the stage it is in (probe,
plan, encode...). Both live in contextvars and are injected into every log
record by RunContextFilter.
"""

import contextvars
import logging
from collections.abc import Generator
from contextlib import contextmanager

_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)


def get_run_context() -> tuple[str | None, str | None]:
    """Get the current (run_id, stage); either may be None."""
    return _run_id.get(), _stage.get()


@contextmanager
def run_context(run_id: str, stage: str | None = None) -> Generator[None, None, None]:
    """Set run context on entry and restore the previous context on exit.

    Example:
        with run_context("a1b2c3", "probe"):
            logger.info("Probing clips")  # Tagged [Ra1b2c3:probe]
    """
    run_token = _run_id.set(run_id)
    stage_token = _stage.set(stage)
    try:
        yield
    finally:
        _stage.reset(stage_token)
        _run_id.reset(run_token)


@contextmanager
def stage_context(stage: str) -> Generator[None, None, None]:
    """Change only the stage of the current run context."""
    token = _stage.set(stage)
    try:
        yield
    finally:
        _stage.reset(token)


class RunContextFilter(logging.Filter):
    """Logging filter that injects run context into log records.

    Adds run_id and stage attributes for JSON output and a compact run_tag
    ("[Ra1b2c3:encode] ") for text output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject run context into the record. Never filters anything out."""
        run_id, stage = get_run_context()

        record.run_id = run_id
        record.stage = stage

        if run_id:
            if stage:
                record.run_tag = f"[R{run_id}:{stage}] "
            else:
                record.run_tag = f"[R{run_id}] "
        else:
            record.run_tag = ""

        return True
