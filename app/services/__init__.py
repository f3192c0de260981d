from app.services.prompt_builder import build_prompt, parse_mode
from app.services.summarizer import SummaryOrchestrator, SummaryResult
from app.services.errors import (
    AllProvidersFailedError,
    ConfigError,
    NoInputError,
    NoNotesError,
    PersistenceError,
    ProviderError,
)

__all__ = [
    'build_prompt',
    'parse_mode',
    'SummaryOrchestrator',
    'SummaryResult',
    'AllProvidersFailedError',
    'ConfigError',
    'NoInputError',
    'NoNotesError',
    'PersistenceError',
    'ProviderError',
]
