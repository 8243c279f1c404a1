"""Vectorization strategies for building document-term matrices."""

from typing import Iterable, Optional

import numpy as np
import pandas as pd
import scipy.sparse as sp
from sklearn.exceptions import NotFittedError
from sklearn.feature_extraction.text import CountVectorizer, HashingVectorizer, TfidfVectorizer

from bow_stylometry.core.config import AnalysisConfig
from bow_stylometry.core.constants import VECTORIZER_STRATEGIES
from bow_stylometry.core.errors import FeatureMismatchError
from bow_stylometry.text import TOKEN_PATTERN


def create_count_vectorizer(
    min_df=1,
    max_df=1.0,
    max_features=None,
    stop_words=None,
    analyzer='word'
) -> CountVectorizer:
    """
    Create a raw term count vectorizer.

    The vocabulary is learned from whatever text it is fitted on, so fit it
    on the training documents only.

    Args:
        min_df: Minimum document frequency (int count or float proportion)
        max_df: Maximum document frequency (int count or float proportion)
        max_features: Keep only the most frequent terms (None keeps all)
        stop_words: None, 'english' or a list of words to drop
        analyzer: 'word' or a callable returning tokens (e.g. a collocation
            model's analyzer)

    Returns:
        Unfitted CountVectorizer

    Examples:
        >>> vectorizer = create_count_vectorizer()
        >>> X_train = vectorizer.fit_transform(train_df['text'])
    """
    if callable(analyzer):
        # A custom analyzer does its own tokenization
        return CountVectorizer(
            analyzer=analyzer,
            min_df=min_df,
            max_df=max_df,
            max_features=max_features
        )

    return CountVectorizer(
        lowercase=True,
        token_pattern=TOKEN_PATTERN,
        stop_words=stop_words,
        min_df=min_df,
        max_df=max_df,
        max_features=max_features
    )


def create_hash_vectorizer(n_features=2 ** 14, ngram_range=(1, 2), stop_words=None) -> HashingVectorizer:
    """
    Create a hashed 1- and 2-gram count vectorizer.

    Terms are hashed into ``n_features`` buckets, so there is no vocabulary
    to fit and unseen tokens are always usable (at the price of collisions).
    Counts are kept non-negative and unnormalized.
    """
    return HashingVectorizer(
        n_features=n_features,
        ngram_range=tuple(ngram_range),
        lowercase=True,
        token_pattern=TOKEN_PATTERN,
        stop_words=stop_words,
        alternate_sign=False,
        norm=None
    )


def create_tfidf_vectorizer(
    min_df=1,
    max_df=1.0,
    max_features=None,
    stop_words=None,
    norm=None
) -> TfidfVectorizer:
    """
    Create a TF-IDF vectorizer (count vectorizer followed by IDF reweighting).

    With ``norm=None`` each weight is ``count * idf`` where
    ``idf = log((1 + n) / (1 + df)) + 1``; the IDF vector is learned on fit and
    reused unchanged by every later transform.
    """
    return TfidfVectorizer(
        lowercase=True,
        token_pattern=TOKEN_PATTERN,
        stop_words=stop_words,
        min_df=min_df,
        max_df=max_df,
        max_features=max_features,
        norm=norm,
        use_idf=True,
        smooth_idf=True,
        sublinear_tf=False
    )


def create_vectorizer(strategy: str, config: Optional[AnalysisConfig] = None):
    """
    Create the vectorizer for a strategy ('count', 'hash' or 'tfidf').

    Args:
        strategy: One of VECTORIZER_STRATEGIES
        config: Analysis settings (defaults used when None)

    Returns:
        Unfitted scikit-learn vectorizer

    Raises:
        ValueError: If strategy is unknown
    """
    if strategy not in VECTORIZER_STRATEGIES:
        raise ValueError(f"Invalid strategy: {strategy}. Must be one of {VECTORIZER_STRATEGIES}")
    if config is None:
        config = AnalysisConfig()

    if strategy == 'count':
        return create_count_vectorizer(
            min_df=config.min_df,
            max_df=config.max_df,
            max_features=config.max_features,
            stop_words=config.stop_words
        )
    if strategy == 'hash':
        return create_hash_vectorizer(
            n_features=config.hash_features,
            ngram_range=config.hash_ngram_range,
            stop_words=config.stop_words
        )
    return create_tfidf_vectorizer(
        min_df=config.min_df,
        max_df=config.max_df,
        max_features=config.max_features,
        stop_words=config.stop_words,
        norm=config.tfidf_norm
    )


def is_fitted(vectorizer) -> bool:
    """Whether a vectorizer can transform text (hashing vectorizers always can)."""
    if isinstance(vectorizer, HashingVectorizer):
        return True
    return hasattr(vectorizer, 'vocabulary_')


def fit_vectorizer(vectorizer, train_texts: Iterable[str]):
    """
    Fit a vectorizer on training text and return the training matrix.

    Args:
        vectorizer: Unfitted vectorizer from create_vectorizer()
        train_texts: Training documents

    Returns:
        Sparse CSR training document-term matrix
    """
    return sp.csr_matrix(vectorizer.fit_transform(list(train_texts)))


def transform_texts(vectorizer, texts: Iterable[str]):
    """
    Transform text with an already fitted vectorizer.

    The vocabulary (and IDF weights) are never refitted here: tokens that the
    training set did not contain are dropped.

    Raises:
        NotFittedError: If the vectorizer has not been fitted on training text
    """
    if not is_fitted(vectorizer):
        raise NotFittedError("Vectorizer has not been fitted. Call fit_vectorizer() on the training text first.")
    return sp.csr_matrix(vectorizer.transform(list(texts)))


def check_feature_alignment(X_train, X_test):
    """
    Ensure two document-term matrices share the same columns.

    Raises:
        FeatureMismatchError: If the column counts differ
    """
    if X_train.shape[1] != X_test.shape[1]:
        raise FeatureMismatchError(X_train.shape[1], X_test.shape[1])


def tfidf_to_counts(X_tfidf, vectorizer: TfidfVectorizer):
    """
    Recover raw term counts from an unnormalized TF-IDF matrix.

    Only valid for vectorizers created with ``norm=None``.

    Raises:
        ValueError: If the vectorizer normalizes rows
    """
    if vectorizer.norm is not None:
        raise ValueError("Counts can only be recovered from a TF-IDF matrix built with norm=None")
    inverse_idf = sp.diags(1.0 / vectorizer.idf_)
    return sp.csr_matrix(X_tfidf @ inverse_idf)


def get_feature_names(vectorizer):
    """Feature names of a fitted vectorizer; hashed buckets are named ``hash_<i>``."""
    if isinstance(vectorizer, HashingVectorizer):
        return [f"hash_{i}" for i in range(vectorizer.n_features)]
    return vectorizer.get_feature_names_out().tolist()


def vocabulary_table(vectorizer, X) -> pd.DataFrame:
    """
    Summarize a fitted vocabulary against a count matrix.

    Args:
        vectorizer: Fitted CountVectorizer (or TfidfVectorizer)
        X: Raw count matrix built with that vectorizer

    Returns:
        DataFrame with columns term, term_id, term_count, doc_count sorted by
        descending term_count then term
    """
    if not hasattr(vectorizer, 'vocabulary_'):
        raise NotFittedError("Vocabulary table needs a fitted vocabulary-based vectorizer")

    X = sp.csr_matrix(X)
    terms = vectorizer.get_feature_names_out()
    term_count = np.asarray(X.sum(axis=0)).ravel()
    doc_count = np.asarray((X > 0).sum(axis=0)).ravel()

    table = pd.DataFrame({
        'term': terms,
        'term_id': [vectorizer.vocabulary_[t] for t in terms],
        'term_count': term_count,
        'doc_count': doc_count,
    })
    return table.sort_values(['term_count', 'term'], ascending=[False, True]).reset_index(drop=True)
