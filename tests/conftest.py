"""Pytest configuration and shared fixtures."""

import os

from hypothesis import settings

if "PHONY_ENV" not in os.environ:
    os.environ["PHONY_ENV"] = "test"

# Synthesis runs hundreds of permutations per example, far above the default deadline.
settings.register_profile("no_deadline", deadline=None)
settings.load_profile("no_deadline")
