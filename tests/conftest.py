"""
Pytest configuration and shared fixtures.

NO MOCKS - tests run on synthetic two-author corpora and on Gutenberg-style
files written to temporary cache directories, so no network access is needed.
"""

import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


AUSTEN_WORDS = [
    "elizabeth", "darcy", "bennet", "netherfield", "pemberley", "bingley",
    "ball", "marriage", "fortune", "sister", "lady", "amiable", "civility",
    "regiment", "estate", "carriage", "agreeable", "wickham", "longbourn", "lydia",
]
DICKENS_WORDS = [
    "paris", "london", "guillotine", "bastille", "carton", "darnay",
    "manette", "lorry", "defarge", "knitting", "wine", "shop", "prisoner",
    "tellson", "bank", "revolution", "citizen", "tribunal", "coach", "mob",
]
SHARED_WORDS = [
    "the", "and", "of", "to", "a", "in", "was", "he", "she", "it",
    "his", "her", "that", "with", "for", "had", "said", "upon", "very", "time",
]


def make_documents(author_words, n_docs, seed, length=14, author_share=0.3):
    """Random documents mixing author-specific and shared words."""
    rng = np.random.default_rng(seed)
    docs = []
    for _ in range(n_docs):
        n_author = max(1, int(round(length * author_share)))
        words = list(rng.choice(author_words, size=n_author)) + list(rng.choice(SHARED_WORDS, size=length - n_author))
        rng.shuffle(words)
        docs.append(" ".join(words))
    return docs


def make_corpus(n_docs=100, seed=0, author_share=0.3):
    """Document table in the loader's format for two synthetic authors."""
    austen = make_documents(AUSTEN_WORDS, n_docs, seed, author_share=author_share)
    dickens = make_documents(DICKENS_WORDS, n_docs, seed + 1, author_share=author_share)
    corpus = pd.DataFrame({
        'gutenberg_id': [1342] * n_docs + [98] * n_docs,
        'title': ['Pride and Prejudice'] * n_docs + ['A Tale of Two Cities'] * n_docs,
        'author': ['austen'] * n_docs + ['dickens'] * n_docs,
        'label': [0] * n_docs + [1] * n_docs,
        'text': austen + dickens,
    })
    corpus.insert(0, 'doc_id', range(len(corpus)))
    return corpus


def make_gutenberg_book(title, lines):
    """Raw text in Project Gutenberg's plain-text layout."""
    header = [
        f"\ufeffThe Project Gutenberg eBook of {title}",
        "",
        "This ebook is for the use of anyone anywhere.",
        "",
        f"Title: {title}",
        "",
        "Author: Test Author",
        "",
        f"*** START OF THE PROJECT GUTENBERG EBOOK {title.upper()} ***",
        "",
    ]
    footer = [
        "",
        f"*** END OF THE PROJECT GUTENBERG EBOOK {title.upper()} ***",
        "",
        "Updated editions will replace the previous one.",
    ]
    return "\n".join(header + list(lines) + footer)


def write_cached_books(cache_dir, n_lines=150, seed=0):
    """
    Write two synthetic Gutenberg books into a loader cache directory.

    Returns:
        Ordered mapping author -> Gutenberg id matching the cached files
    """
    cache_dir = Path(cache_dir)
    cache_dir.mkdir(parents=True, exist_ok=True)
    books = {'austen': 1342, 'dickens': 98}
    contents = {
        1342: make_gutenberg_book("Pride and Prejudice", _with_blank_lines(make_documents(AUSTEN_WORDS, n_lines, seed))),
        98: make_gutenberg_book("A Tale of Two Cities", _with_blank_lines(make_documents(DICKENS_WORDS, n_lines, seed + 1))),
    }
    for gutenberg_id, text in contents.items():
        (cache_dir / f"{gutenberg_id}.txt").write_text(text, encoding="utf-8")
    return books


def _with_blank_lines(lines, every=5):
    out = []
    for i, line in enumerate(lines, start=1):
        out.append(line)
        if i % every == 0:
            out.append("")
    return out


@pytest.fixture
def corpus():
    """Synthetic 2 x 100 document corpus, labels 0 (austen) and 1 (dickens)."""
    return make_corpus(n_docs=100, seed=0)


@pytest.fixture
def split_corpus(corpus):
    """Fixed 80/20 split of the synthetic corpus."""
    from bow_stylometry.corpus import split_documents
    return split_documents(corpus, train_size=0.8, seed=42, stratify=True)


@pytest.fixture
def cached_books(tmp_path):
    """Cache directory holding two synthetic Gutenberg books."""
    cache_dir = tmp_path / "raw"
    books = write_cached_books(cache_dir)
    return books, cache_dir


@pytest.fixture
def phrase_texts():
    """Texts with recurring phrases for collocation mining."""
    rng = np.random.default_rng(7)
    fillers = ["walked", "quietly", "towards", "bright", "morning", "slowly", "garden", "river", "window", "letter"]
    texts = []
    for i in range(120):
        words = list(rng.choice(fillers, size=6))
        if i % 2 == 0:
            words.insert(2, "new york city")
        if i % 3 == 0:
            words.insert(1, "good humour")
        texts.append(" ".join(words))
    return texts
