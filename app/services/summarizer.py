"""
Fallback orchestration for day summaries.

Tries the primary provider, then the secondary one, strictly in sequence.
The first success wins; if every provider fails the caller gets a single
AllProvidersFailedError with each underlying cause attached for logging.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from app.services.errors import (
    AllProvidersFailedError,
    ConfigError,
    NoInputError,
    ProviderError,
)
from app.services.llm_providers import ChatCompletionClient, DoubaoClient, QwenClient
from app.services.prompt_builder import REGULAR, build_prompt

logger = logging.getLogger(__name__)

PRIMARY = "primary"
SECONDARY = "secondary"


@dataclass
class SummaryResult:
    text: str
    provider: str  # role in the chain: "primary" / "secondary"
    provider_name: str  # vendor: "qwen" / "doubao"


class SummaryOrchestrator:
    """Ordered provider chain with short-circuit on the first success."""

    def __init__(self, providers: Sequence[Tuple[str, ChatCompletionClient]]):
        self.providers = list(providers)

    @classmethod
    def from_env(cls):
        return cls([
            (PRIMARY, QwenClient.from_env()),
            (SECONDARY, DoubaoClient.from_env()),
        ])

    def summarize(self, notes, mode: str = REGULAR, now: Optional[datetime] = None) -> SummaryResult:
        if not notes:
            raise NoInputError("No notes to summarize")

        prompt = build_prompt(notes, mode, now)
        failures: List[Tuple[str, Exception]] = []

        for role, client in self.providers:
            try:
                text = client.complete(prompt)
            except ConfigError as e:
                logger.warning("Skipping %s provider (%s): %s", role, client.name, e)
                failures.append((client.name, e))
                continue
            except ProviderError as e:
                logger.error(
                    "%s provider (%s) failed: status=%s body=%s",
                    role, client.name, e.status, e.body[:500],
                )
                failures.append((client.name, e))
                continue

            if failures:
                logger.info("Summary generated by %s provider (%s) after fallback", role, client.name)
            return SummaryResult(text=text, provider=role, provider_name=client.name)

        error = AllProvidersFailedError(failures)
        logger.error("All summary providers failed: %s", error.describe())
        raise error


def get_orchestrator() -> SummaryOrchestrator:
    """FastAPI dependency; overridden in tests."""
    return SummaryOrchestrator.from_env()
