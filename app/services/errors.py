"""
Service Errors

Exceptions raised by the prompt/provider/orchestrator pipeline and by the
note and summary services. Routes translate them into JSON
``{"error": ...}`` bodies using ``status_code`` and ``user_message``.
"""

from typing import List, Optional, Tuple


class DaybookError(Exception):
    status_code = 500
    user_message = "Internal server error"

    def __str__(self):
        return self.args[0] if self.args else self.user_message


class NotFoundError(DaybookError):
    status_code = 404
    user_message = "Not found"


class ForbiddenError(DaybookError):
    status_code = 403
    user_message = "Forbidden"


class SummarizationError(DaybookError):
    """Base class for everything the end-of-day pipeline can raise."""

    user_message = "Failed to generate summary"


class ConfigError(SummarizationError):
    """A provider credential or endpoint id is missing from the environment."""


class ProviderError(SummarizationError):
    """A provider answered with a non-2xx status or could not be reached."""

    def __init__(self, provider: str, status: Optional[int], body: str = ""):
        self.provider = provider
        self.status = status
        self.body = body
        super().__init__(f"{provider} request failed (status={status}): {body[:500]}")


class NoInputError(SummarizationError):
    """The orchestrator was asked to summarize an empty note list."""

    status_code = 400
    user_message = "No notes to summarize"


class NoNotesError(NoInputError):
    """The caller has no pending notes."""


class AllProvidersFailedError(SummarizationError):
    """Every provider in the fallback chain failed.

    ``failures`` keeps each ``(provider_name, exception)`` pair for the logs;
    ``str()`` only ever shows the generic user-facing message.
    """

    user_message = "Both AI providers failed. Please try again later."

    def __init__(self, failures: List[Tuple[str, Exception]]):
        self.failures = failures
        super().__init__(self.user_message)

    def describe(self) -> str:
        return "; ".join(f"{name}: {exc!r}" for name, exc in self.failures)


class PersistenceError(SummarizationError):
    """The generated summary could not be written."""

    user_message = "Failed to save summary"
