"""Tests for the environment-driven configuration."""

import pytest

from phony_xmss.config import PHONY_ENV, PHONY_ENV_VAR, read_phony_env


def test_suite_runs_with_test_preset() -> None:
    """The test suite runs with `PHONY_ENV=test`."""
    assert PHONY_ENV == "test"


@pytest.mark.parametrize(
    "raw, expected",
    [
        pytest.param("prod", "prod", id="prod"),
        pytest.param("test", "test", id="test"),
        pytest.param(" PROD ", "prod", id="case and whitespace normalized"),
    ],
)
def test_read_phony_env(monkeypatch: pytest.MonkeyPatch, raw: str, expected: str) -> None:
    """Known preset names are accepted in any case."""
    monkeypatch.setenv(PHONY_ENV_VAR, raw)
    assert read_phony_env() == expected


def test_default_is_prod(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without the variable the production preset is selected."""
    monkeypatch.delenv(PHONY_ENV_VAR, raising=False)
    assert read_phony_env() == "prod"


def test_unknown_env_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unknown preset names are rejected."""
    monkeypatch.setenv(PHONY_ENV_VAR, "staging")
    with pytest.raises(ValueError, match="Invalid PHONY_ENV"):
        read_phony_env()
