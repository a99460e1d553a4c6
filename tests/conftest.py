"""Pytest configuration for environment-driven tests.

Every test starts without variables under the prefixes used in this suite so
that values leaking from the caller's shell cannot change results.
"""

import os

import pytest

_TEST_PREFIXES = (
    "ENV_CONFIG",
    "APP",
    "X_",
    "FOO",
    "SECRET",
    "PORT",
    "TIMEOUT",
    "SERVICE_HOST",
    "MULTI_WORD_ALT",
    "REQUIRED_VAR",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove variables that collide with the keys used by the tests."""
    for key in list(os.environ):
        if key.startswith(_TEST_PREFIXES):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def secret_file(tmp_path):
    """Write a secret to a temporary file and return its path."""

    def _write(content: str = "qwerty", name: str = "secret.txt") -> str:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write
