"""Tests for perch.env — runtime environment detection."""

import pytest

from perch.env import current_environment, is_development, is_production, is_testing


class TestCurrentEnvironment:
    def test_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PERCH_ENV", raising=False)
        assert current_environment() == "development"
        assert is_development()

    def test_normalized(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PERCH_ENV", "  Production ")
        assert current_environment() == "production"
        assert is_production()
        assert not is_development()

    def test_blank_is_development(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PERCH_ENV", "  ")
        assert current_environment() == "development"

    def test_testing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PERCH_ENV", "test")
        assert is_testing()

    def test_custom_value_returned(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PERCH_ENV", "Staging")
        assert current_environment() == "staging"
        assert not (is_development() or is_testing() or is_production())
