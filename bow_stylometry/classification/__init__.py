"""Document-term vectorization and authorship classification."""

from .vectorizer import (
    create_count_vectorizer,
    create_hash_vectorizer,
    create_tfidf_vectorizer,
    create_vectorizer,
    fit_vectorizer,
    transform_texts,
    check_feature_alignment,
    tfidf_to_counts,
    get_feature_names,
    vocabulary_table,
)
from .classifier import AuthorshipClassifier, compute_auc
from .experiment import (
    run_classification_experiment,
    compare_strategies,
    save_classification_results,
    load_classification_results,
)

__all__ = [
    'create_count_vectorizer',
    'create_hash_vectorizer',
    'create_tfidf_vectorizer',
    'create_vectorizer',
    'fit_vectorizer',
    'transform_texts',
    'check_feature_alignment',
    'tfidf_to_counts',
    'get_feature_names',
    'vocabulary_table',
    'AuthorshipClassifier',
    'compute_auc',
    'run_classification_experiment',
    'compare_strategies',
    'save_classification_results',
    'load_classification_results',
]
