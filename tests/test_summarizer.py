"""
Unit tests for the primary/secondary fallback orchestrator.
"""

import logging
from datetime import datetime

import pytest

from app.services.errors import AllProvidersFailedError, ConfigError, NoInputError
from app.services.prompt_builder import COUNSELLING, build_prompt
from app.services.summarizer import PRIMARY, SECONDARY, SummaryOrchestrator
from conftest import provider_failure, stub_provider

NOW = datetime(2024, 1, 15, 21, 0)
NOTES = [
    {"id": 1, "content": "Went for a run", "created_at": datetime(2024, 1, 15, 7, 30)},
    {"id": 2, "content": "Finished project report", "created_at": datetime(2024, 1, 15, 16, 5)},
]


def chain(primary, secondary):
    return SummaryOrchestrator([(PRIMARY, primary), (SECONDARY, secondary)])


class TestSummarize:
    """Tests for SummaryOrchestrator.summarize."""

    def test_empty_notes_never_reach_a_provider(self):
        primary = stub_provider("qwen", "unused")
        secondary = stub_provider("doubao", "unused")

        with pytest.raises(NoInputError):
            chain(primary, secondary).summarize([], now=NOW)

        assert primary.complete.call_count == 0
        assert secondary.complete.call_count == 0

    def test_primary_success_short_circuits(self):
        primary = stub_provider("qwen", "Great productive day!")
        secondary = stub_provider("doubao", "unused")

        result = chain(primary, secondary).summarize(NOTES, now=NOW)

        assert result.text == "Great productive day!"
        assert result.provider == PRIMARY
        assert result.provider_name == "qwen"
        secondary.complete.assert_not_called()

    def test_primary_failure_falls_back_to_secondary(self):
        primary = stub_provider("qwen", error=provider_failure())
        secondary = stub_provider("doubao", "Fallback summary")

        result = chain(primary, secondary).summarize(NOTES, now=NOW)

        assert result.text == "Fallback summary"
        assert result.provider == SECONDARY
        assert result.provider_name == "doubao"

    def test_config_error_also_falls_back(self):
        primary = stub_provider("qwen", error=ConfigError("qwen: API key is not configured"))
        secondary = stub_provider("doubao", "Fallback summary")

        result = chain(primary, secondary).summarize(NOTES, now=NOW)

        assert result.provider == SECONDARY

    def test_both_providers_receive_identical_prompt(self):
        primary = stub_provider("qwen", error=provider_failure())
        secondary = stub_provider("doubao", "ok")

        chain(primary, secondary).summarize(NOTES, COUNSELLING, now=NOW)

        expected = build_prompt(NOTES, COUNSELLING, NOW)
        primary.complete.assert_called_once_with(expected)
        secondary.complete.assert_called_once_with(expected)

    def test_both_fail_raises_aggregate_error(self):
        primary_error = provider_failure("qwen", 500, "boom")
        secondary_error = ConfigError("doubao: DOUBAO_API_KEY is not set")
        primary = stub_provider("qwen", error=primary_error)
        secondary = stub_provider("doubao", error=secondary_error)

        with pytest.raises(AllProvidersFailedError) as exc_info:
            chain(primary, secondary).summarize(NOTES, now=NOW)

        error = exc_info.value
        assert str(error) == "Both AI providers failed. Please try again later."
        assert error.failures == [("qwen", primary_error), ("doubao", secondary_error)]
        assert "boom" in error.describe()

    def test_failures_are_logged(self, caplog):
        primary = stub_provider("qwen", error=provider_failure("qwen", 503, "overloaded"))
        secondary = stub_provider("doubao", error=ConfigError("doubao: DOUBAO_API_KEY is not set"))

        with caplog.at_level(logging.WARNING, logger="app.services.summarizer"):
            with pytest.raises(AllProvidersFailedError):
                chain(primary, secondary).summarize(NOTES, now=NOW)

        messages = [r.getMessage() for r in caplog.records]
        assert any("overloaded" in m for m in messages)
        assert any("DOUBAO_API_KEY" in m for m in messages)
