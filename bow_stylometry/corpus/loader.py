"""Download Project Gutenberg books and assemble the labeled document table."""

import logging
from pathlib import Path

import pandas as pd
import requests
from cleantext import clean

from bow_stylometry.core.constants import (
    BOOKS,
    GUTENBERG_END,
    GUTENBERG_MIRROR,
    GUTENBERG_START,
    UNITS,
)
from bow_stylometry.core.errors import CorpusUnavailableError

logger = logging.getLogger(__name__)

CORPUS_COLUMNS = ['doc_id', 'gutenberg_id', 'title', 'author', 'label', 'text']


def fetch_gutenberg_text(gutenberg_id, mirror=GUTENBERG_MIRROR, cache_dir=None, timeout=30):
    """
    Fetch the raw plain-text file of a Gutenberg book.

    Args:
        gutenberg_id: Integer Project Gutenberg book id
        mirror: Base URL serving ``{id}/pg{id}.txt``
        cache_dir: Optional directory; when given, ``{id}.txt`` is read from it
            if present and written to it after a download
        timeout: HTTP timeout in seconds

    Returns:
        Raw book text, Gutenberg header and footer included

    Raises:
        CorpusUnavailableError: If the book cannot be downloaded
    """
    cache_path = Path(cache_dir) / f"{gutenberg_id}.txt" if cache_dir else None
    if cache_path is not None and cache_path.is_file():
        logger.info("Reading Gutenberg book %s from cache: %s", gutenberg_id, cache_path)
        return cache_path.read_text(encoding="utf-8")

    url = f"{mirror.rstrip('/')}/{gutenberg_id}/pg{gutenberg_id}.txt"
    logger.info("Downloading Gutenberg book %s from %s", gutenberg_id, url)
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise CorpusUnavailableError(gutenberg_id, str(e)) from e

    response.encoding = response.encoding or "utf-8"
    text = response.text
    if not text.strip():
        raise CorpusUnavailableError(gutenberg_id, "empty response")

    if cache_path is not None:
        cache_path.parent.mkdir(parents=True, exist_ok=True)
        cache_path.write_text(text, encoding="utf-8")

    return text


def parse_gutenberg_title(raw_text):
    """
    Read the book title from a Gutenberg header.

    Uses the ``Title:`` field, falling back to the
    "The Project Gutenberg eBook of ..." banner.

    Examples:
        >>> parse_gutenberg_title("Title: Pride and Prejudice\\nAuthor: Jane Austen")
        'Pride and Prejudice'
    """
    lines = [line.strip() for line in raw_text.lstrip("\ufeff").splitlines()]
    for line in lines:
        if line.lower().startswith("title:"):
            title = line.split(":", 1)[1].strip()
            if title:
                return title
    banner = "the project gutenberg ebook of "
    for line in lines:
        lowered = line.lower()
        if banner in lowered:
            title = line[lowered.index(banner) + len(banner):].split(",")[0].strip()
            if title:
                return title
    return "unknown"


def strip_gutenberg_boilerplate(raw_text):
    """Remove the BOM and the Project Gutenberg header and footer."""
    text = raw_text.lstrip("\ufeff")

    lines = text.splitlines()
    for i, line in enumerate(lines):
        if GUTENBERG_START in line.upper():
            lines = lines[i + 1:]
            break
    for i, line in enumerate(lines):
        if GUTENBERG_END in line.upper():
            lines = lines[:i]
            break

    return "\n".join(lines)


def split_units(text, unit="line"):
    """
    Split book text into document units.

    ``"line"`` keeps one unit per line (blank lines included, so empty units
    can be dropped later). ``"paragraph"`` joins runs of non-blank lines.
    """
    if unit not in UNITS:
        raise ValueError(f"Invalid unit: {unit}. Must be one of {UNITS}")

    if unit == "line":
        units = text.splitlines()
    else:
        units = [
            paragraph.replace("\n", " ")
            for paragraph in text.replace("\r\n", "\n").split("\n\n")
        ]

    return [
        clean(u, fix_unicode=True, to_ascii=True, lower=False, no_line_breaks=True)
        if u.strip() else ""
        for u in units
    ]


def book_to_frame(raw_text, author, label, gutenberg_id, unit="line"):
    """Turn one raw Gutenberg book into a document DataFrame (without doc_id)."""
    title = parse_gutenberg_title(raw_text)
    units = split_units(strip_gutenberg_boilerplate(raw_text), unit=unit)

    return pd.DataFrame({
        'gutenberg_id': gutenberg_id,
        'title': title,
        'author': author,
        'label': label,
        'text': units,
    })


def load_corpus(books=None, unit="line", mirror=GUTENBERG_MIRROR, cache_dir=None, timeout=30):
    """
    Load books and combine them into a single labeled document table.

    Args:
        books: Ordered mapping author -> Gutenberg id; the position of an author
            in the mapping is its integer label
        unit: "line" or "paragraph"
        mirror: Gutenberg mirror base URL
        cache_dir: Optional raw text cache directory
        timeout: HTTP timeout in seconds

    Returns:
        DataFrame with columns doc_id, gutenberg_id, title, author, label, text.
        ``doc_id`` is the row position after assembly.

    Raises:
        CorpusUnavailableError: If any book cannot be fetched

    Examples:
        >>> corpus = load_corpus({'austen': 1342, 'dickens': 98}, cache_dir='data/raw')
    """
    if books is None:
        books = BOOKS

    frames = []
    for label, (author, gutenberg_id) in enumerate(books.items()):
        raw_text = fetch_gutenberg_text(gutenberg_id, mirror=mirror, cache_dir=cache_dir, timeout=timeout)
        frame = book_to_frame(raw_text, author, label, gutenberg_id, unit=unit)
        logger.info("Loaded %d %ss of '%s' (%s)", len(frame), unit, frame['title'].iloc[0] if len(frame) else "", author)
        frames.append(frame)

    corpus = pd.concat(frames, ignore_index=True)
    corpus.insert(0, 'doc_id', range(len(corpus)))

    return corpus[CORPUS_COLUMNS]
