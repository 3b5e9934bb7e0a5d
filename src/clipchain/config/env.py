"""Environment variable reader with dependency injection support.

Accepts an optional env mapping so tests can supply variables without
touching os.environ.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)


class EnvReader:
    """Environment variable reader with type conversion.

    Example:
        reader = EnvReader(env={"CLIPCHAIN_LOG_LEVEL": "debug"})
        level = reader.get_str("CLIPCHAIN_LOG_LEVEL", "info")  # "debug"
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        """Initialize the environment reader.

        Args:
            env: Optional mapping to use instead of os.environ.
        """
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def get_str(self, var: str, default: str | None = None) -> str | None:
        """Get a string; empty values count as unset."""
        value = self._env.get(var)
        if not value:
            return default
        return value

    def get_path(
        self, var: str, must_exist: bool = True, default: Path | None = None
    ) -> Path | None:
        """Get a path from an environment variable.

        Args:
            var: Environment variable name.
            must_exist: If True, a path that does not exist is ignored with
                a warning.
            default: Value returned if unset or ignored.

        Returns:
            Path object, or default.
        """
        value = self._env.get(var)
        if not value:
            return default

        path = Path(value).expanduser()
        if must_exist and not path.exists():
            logger.warning(
                "Environment variable %s points to non-existent path: %s",
                var,
                value,
            )
            return default
        return path
