"""LDA topic decomposition of a document-term matrix."""

import logging
from typing import List

import numpy as np
import pandas as pd
from sklearn.decomposition import LatentDirichletAllocation
from sklearn.exceptions import NotFittedError

logger = logging.getLogger(__name__)


class TopicModel:
    """
    Latent Dirichlet Allocation over a count matrix.

    Fitted once; there is no online update.

    Attributes:
        model: Fitted sklearn LatentDirichletAllocation
        doc_topic_: Document-topic weights from the fit (rows sum to 1)
        topic_term_: Topic-term distributions (rows sum to 1)

    Examples:
        >>> topics = TopicModel(n_topics=20)
        >>> doc_topic = topics.fit_transform(X)
        >>> topics.top_terms(feature_names, n=10)
    """

    def __init__(
        self,
        n_topics: int = 20,
        max_iter: int = 50,
        doc_topic_prior: float = 0.1,
        topic_word_prior: float = 0.01,
        learning_method: str = 'batch',
        seed: int = 42
    ):
        if n_topics < 1:
            raise ValueError(f"n_topics must be positive, got: {n_topics}")

        self.n_topics = n_topics
        self.max_iter = max_iter
        self.doc_topic_prior = doc_topic_prior
        self.topic_word_prior = topic_word_prior
        self.learning_method = learning_method
        self.seed = seed

        self.model = None
        self.doc_topic_ = None
        self.topic_term_ = None

    def fit_transform(self, X) -> np.ndarray:
        """
        Fit the topic model and return the document-topic matrix.

        Args:
            X: Document-term count matrix (n_documents x n_terms)

        Returns:
            Array (n_documents x n_topics) whose rows sum to 1
        """
        model = LatentDirichletAllocation(
            n_components=self.n_topics,
            doc_topic_prior=self.doc_topic_prior,
            topic_word_prior=self.topic_word_prior,
            learning_method=self.learning_method,
            max_iter=self.max_iter,
            random_state=self.seed
        )
        doc_topic = model.fit_transform(X)

        self.model = model
        self.doc_topic_ = doc_topic
        self.topic_term_ = model.components_ / model.components_.sum(axis=1, keepdims=True)

        logger.info(
            "Fitted %d topics on %d documents x %d terms (%d iterations, perplexity %.1f)",
            self.n_topics, X.shape[0], X.shape[1], model.n_iter_, model.bound_
        )
        return doc_topic

    def transform(self, X) -> np.ndarray:
        """Topic weights of new documents under the fitted model."""
        if self.model is None:
            raise NotFittedError("Topic model must be fitted before use")
        return self.model.transform(X)

    def top_terms(self, feature_names: List[str], n: int = 10) -> pd.DataFrame:
        """
        Highest-weight terms of every topic.

        Returns:
            Long DataFrame with columns topic, rank, term, weight
        """
        if self.topic_term_ is None:
            raise NotFittedError("Topic model must be fitted before use")

        rows = []
        for topic, weights in enumerate(self.topic_term_):
            for rank, term_idx in enumerate(np.argsort(weights)[::-1][:n]):
                rows.append({
                    'topic': topic,
                    'rank': rank,
                    'term': feature_names[term_idx],
                    'weight': float(weights[term_idx]),
                })
        return pd.DataFrame(rows, columns=['topic', 'rank', 'term', 'weight'])
