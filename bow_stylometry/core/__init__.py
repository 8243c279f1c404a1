"""Shared constants, configuration and errors."""

from .config import AnalysisConfig
from .errors import BowStylometryError, CorpusUnavailableError, FeatureMismatchError

__all__ = [
    'AnalysisConfig',
    'BowStylometryError',
    'CorpusUnavailableError',
    'FeatureMismatchError',
]
