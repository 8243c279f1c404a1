"""Collocation mining."""

from .model import CollocationAnalyzer, CollocationModel, STAT_COLUMNS

__all__ = [
    'CollocationModel',
    'CollocationAnalyzer',
    'STAT_COLUMNS',
]
