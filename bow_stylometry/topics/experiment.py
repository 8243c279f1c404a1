"""Collocation-aware topic modeling experiment."""

import logging
from typing import Dict, Optional

import pandas as pd

from bow_stylometry.classification.vectorizer import create_count_vectorizer, fit_vectorizer
from bow_stylometry.collocations import CollocationModel
from bow_stylometry.core.config import AnalysisConfig
from .lda import TopicModel

logger = logging.getLogger(__name__)


def run_topic_experiment(
    train_df: pd.DataFrame,
    config: Optional[AnalysisConfig] = None,
    author: Optional[str] = None,
    n_top_terms: int = 10
) -> Dict:
    """
    Mine collocations, fold them into the vocabulary and fit a topic model.

    Steps:
    1. Fit a CollocationModel on the chosen author's training text
    2. Prune it with the configured pmi / gensim / lfmd thresholds
    3. Build a collocation-aware count matrix (stopwords removed, rare terms
       pruned by min_df) over all training documents
    4. Fit the topic model

    Args:
        train_df: Training documents
        config: Analysis settings (defaults used when None)
        author: Author whose text the collocations are mined from (defaults
            to the first configured author)
        n_top_terms: Terms listed per topic

    Returns:
        Dictionary with keys collocation_model, collocation_stat, vectorizer,
        feature_names, topic_model, doc_topic, top_terms, author_topics
    """
    if config is None:
        config = AnalysisConfig()
    if author is None:
        author = config.authors[0]

    author_texts = train_df.loc[train_df['author'] == author, 'text']
    if author_texts.empty:
        raise ValueError(f"No training documents for author: {author}")

    logger.info("Mining collocations from %d %s documents", len(author_texts), author)
    collocation_model = CollocationModel(
        collocation_count_min=config.collocation_count_min,
        stopwords='english'
    )
    collocation_model.fit(author_texts, n_iter=config.collocation_n_iter)
    collocation_model.prune(
        pmi_min=config.prune_pmi_min,
        gensim_min=config.prune_gensim_min,
        lfmd_min=config.prune_lfmd_min
    )

    vectorizer = create_count_vectorizer(
        min_df=config.min_df,
        max_df=config.max_df,
        max_features=config.max_features,
        analyzer=collocation_model.as_analyzer(stop_words='english')
    )
    X = fit_vectorizer(vectorizer, train_df['text'])
    feature_names = vectorizer.get_feature_names_out().tolist()

    topic_model = TopicModel(
        n_topics=config.n_topics,
        max_iter=config.lda_max_iter,
        seed=config.seed
    )
    doc_topic = topic_model.fit_transform(X)

    author_topics = pd.DataFrame(doc_topic, index=train_df['author'].to_numpy())
    author_topics = author_topics.groupby(level=0).mean()
    author_topics.index.name = 'author'
    author_topics.columns.name = 'topic'

    return {
        'author': author,
        'collocation_model': collocation_model,
        'collocation_stat': collocation_model.collocation_stat,
        'vectorizer': vectorizer,
        'feature_names': feature_names,
        'topic_model': topic_model,
        'doc_topic': doc_topic,
        'top_terms': topic_model.top_terms(feature_names, n=n_top_terms),
        'author_topics': author_topics,
    }
