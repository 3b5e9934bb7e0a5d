"""Job file loading and validation.

Job files are YAML mappings validated with Pydantic models. Relative paths
inside a job file are resolved against the directory containing it.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from clipchain.exceptions import ClipchainError
from clipchain.job.models import JobModel, JoinJob
from clipchain.planner.types import TransitionKind


class JobValidationError(ClipchainError):
    """Error during job file validation."""

    stage = "job"

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)


def load_job(job_path: Path) -> JoinJob:
    """Load and validate a job from a YAML file.

    Args:
        job_path: Path to the YAML job file.

    Returns:
        Validated JoinJob.

    Raises:
        JobValidationError: If the job file is missing or invalid.
    """
    if not job_path.exists():
        raise JobValidationError(f"Job file not found: {job_path}")

    try:
        with open(job_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise JobValidationError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        raise JobValidationError("Job file is empty")

    if not isinstance(data, dict):
        raise JobValidationError("Job file must be a YAML mapping")

    return load_job_from_dict(data, base_dir=job_path.parent)


def load_job_from_dict(data: dict[str, Any], base_dir: Path | None = None) -> JoinJob:
    """Validate a job mapping and resolve its paths.

    Args:
        data: Parsed job mapping.
        base_dir: Directory relative paths are resolved against.

    Returns:
        Validated JoinJob.

    Raises:
        JobValidationError: If the job data is invalid.
    """
    try:
        model = JobModel.model_validate(data)
    except ValidationError as e:
        raise JobValidationError(*_format_validation_error(e)) from e

    def resolve(path: Path) -> Path:
        path = path.expanduser()
        if base_dir is not None and not path.is_absolute():
            return base_dir / path
        return path

    return JoinJob(
        output=resolve(model.output),
        inputs=tuple(resolve(p) for p in model.inputs or ()),
        folder=resolve(model.folder) if model.folder is not None else None,
        transition=TransitionKind(model.transition) if model.transition else None,
        transition_duration=model.transition_duration,
        quality=model.quality,
        audio_bitrate=model.audio_bitrate,
    )


def _format_validation_error(error: ValidationError) -> tuple[str, str | None]:
    """Format the first Pydantic error as (message, field)."""
    errors = error.errors()
    if not errors:
        return f"Job validation failed: {error}", None
    first_error = errors[0]
    loc = ".".join(str(x) for x in first_error.get("loc", []))
    msg = first_error.get("msg", str(error))
    if loc:
        return f"Job validation failed: {loc}: {msg}", loc
    return f"Job validation failed: {msg}", None
