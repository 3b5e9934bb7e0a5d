"""YAML job files describing a join."""

from clipchain.job.loader import JobValidationError, load_job, load_job_from_dict
from clipchain.job.models import JobModel, JoinJob

__all__ = [
    "JobModel",
    "JobValidationError",
    "JoinJob",
    "load_job",
    "load_job_from_dict",
]
