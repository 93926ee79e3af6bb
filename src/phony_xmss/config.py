"""
Process-wide settings, read once from the environment at import time.

`PHONY_ENV` picks the parameter preset behind every `TARGET_*` instance:
`prod` (the default) for the production-sized scheme, `test` for the small one
the test suite runs against.
"""

import os

PHONY_ENV_VAR: str = "PHONY_ENV"
"""Name of the environment variable holding the preset name."""

SUPPORTED_PHONY_ENVS: tuple[str, ...] = ("prod", "test")


def read_phony_env() -> str:
    """
    Returns the normalized preset name from the environment.

    Raises:
        ValueError: If the variable names an unknown preset.
    """
    env = os.environ.get(PHONY_ENV_VAR, "prod").strip().lower()
    if env not in SUPPORTED_PHONY_ENVS:
        raise ValueError(
            f"Invalid {PHONY_ENV_VAR} environment variable: {env!r}. "
            f"Supported values: {', '.join(SUPPORTED_PHONY_ENVS)}"
        )
    return env


PHONY_ENV: str = read_phony_env()
"""The active preset name."""
