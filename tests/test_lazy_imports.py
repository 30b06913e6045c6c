"""Tests for perch's lazy top-level exports."""

import pytest

import perch


class TestLazyImports:
    @pytest.mark.parametrize("name", perch.__all__)
    def test_every_export_resolves(self, name: str) -> None:
        assert getattr(perch, name) is not None

    def test_identity(self) -> None:
        from perch.app import App
        from perch.controllers import on

        assert perch.App is App
        assert perch.on is on

    def test_unknown_attribute(self) -> None:
        with pytest.raises(AttributeError, match="no attribute 'Nope'"):
            perch.Nope  # noqa: B018

    def test_version(self) -> None:
        assert perch.__version__
