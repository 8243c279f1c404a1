"""Corpus loading, cleaning and splitting."""

from .loader import (
    fetch_gutenberg_text,
    parse_gutenberg_title,
    strip_gutenberg_boilerplate,
    split_units,
    book_to_frame,
    load_corpus,
)
from .splitting import drop_empty_documents, split_documents

__all__ = [
    'fetch_gutenberg_text',
    'parse_gutenberg_title',
    'strip_gutenberg_boilerplate',
    'split_units',
    'book_to_frame',
    'load_corpus',
    'drop_empty_documents',
    'split_documents',
]
