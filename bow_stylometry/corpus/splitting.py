"""Cleaning and train/test splitting of the document table."""

import logging
from typing import Tuple, Union

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

logger = logging.getLogger(__name__)


def drop_empty_documents(df: pd.DataFrame, text_column: str = 'text') -> pd.DataFrame:
    """
    Remove rows whose text is missing or whitespace only.

    Args:
        df: Document table
        text_column: Name of the text column

    Returns:
        Filtered copy of the table (index preserved)
    """
    text = df[text_column]
    keep = text.notna() & (text.astype(str).str.strip() != '')
    n_dropped = int((~keep).sum())
    if n_dropped:
        logger.debug("Dropped %d empty documents out of %d", n_dropped, len(df))
    return df[keep].copy()


def split_documents(
    df: pd.DataFrame,
    train_size: Union[int, float] = 0.8,
    seed: int = 42,
    stratify: bool = False,
    label_column: str = 'label'
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Randomly split documents into disjoint train and test tables.

    A float ``train_size`` is the fraction of rows used for training. An int
    ``train_size`` is an absolute row count: rows are permuted and the first
    ``train_size`` rows become the training set, the rest the test set
    (the legacy fixed-count split).

    Args:
        df: Cleaned document table
        train_size: Fraction in (0, 1) or absolute row count
        seed: Seed for the permutation
        stratify: Keep the label ratio in both parts (fraction mode only)
        label_column: Column used for stratification

    Returns:
        Tuple of (train_df, test_df)

    Raises:
        ValueError: If train_size does not fit the corpus

    Examples:
        >>> train_df, test_df = split_documents(corpus, train_size=0.8, seed=42)
    """
    n_docs = len(df)

    if isinstance(train_size, (int, np.integer)) and not isinstance(train_size, bool):
        if stratify:
            raise ValueError("stratify is only supported with a fractional train_size")
        if not 0 < train_size < n_docs:
            raise ValueError(
                f"train_size={train_size} rows leaves no test set for a corpus of {n_docs} documents"
            )
        rng = np.random.default_rng(seed)
        order = rng.permutation(n_docs)
        shuffled = df.iloc[order]
        train_df = shuffled.iloc[:train_size].copy()
        test_df = shuffled.iloc[train_size:].copy()
    else:
        if not 0.0 < train_size < 1.0:
            raise ValueError(f"train_size as a fraction must be in (0, 1), got: {train_size}")
        train_df, test_df = train_test_split(
            df,
            train_size=train_size,
            random_state=seed,
            shuffle=True,
            stratify=df[label_column] if stratify else None
        )
        train_df = train_df.copy()
        test_df = test_df.copy()

    logger.info("Split %d documents into %d train / %d test", n_docs, len(train_df), len(test_df))

    return train_df, test_df
