"""Tests for environment-driven evaluation settings."""

from __future__ import annotations

import logging

import pydantic
import pytest

from simplexpr.config import SIMPLEXPR_TRACE_VAR, EvalSettings, get_eval_settings


class TestGetEvalSettings:
    def test_default_is_disabled(self) -> None:
        assert get_eval_settings() == EvalSettings(trace=False)

    @pytest.mark.parametrize("raw", ["1", "true", "YES", " on "])
    def test_truthy_values(self, raw: str, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(SIMPLEXPR_TRACE_VAR, raw)
        assert get_eval_settings().trace is True

    @pytest.mark.parametrize("raw", ["0", "false", "off", ""])
    def test_falsy_values(self, raw: str, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(SIMPLEXPR_TRACE_VAR, raw)
        assert get_eval_settings().trace is False

    def test_unknown_value_warns(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setenv(SIMPLEXPR_TRACE_VAR, "loud")
        with caplog.at_level(logging.WARNING, logger="simplexpr.config"):
            assert get_eval_settings().trace is False
        assert "loud" in caplog.text


def test_settings_are_frozen() -> None:
    settings = EvalSettings()
    with pytest.raises(pydantic.ValidationError):
        settings.trace = True  # type: ignore[misc]
