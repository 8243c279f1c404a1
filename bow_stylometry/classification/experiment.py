"""High-level experiment runner for authorship classification."""

import logging
import pickle
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd
from tqdm import tqdm

from bow_stylometry.core.config import AnalysisConfig
from bow_stylometry.core.constants import RESULTS_DIR, VECTORIZER_STRATEGIES
from .classifier import AuthorshipClassifier
from .vectorizer import (
    check_feature_alignment,
    create_vectorizer,
    fit_vectorizer,
    get_feature_names,
    transform_texts,
)

logger = logging.getLogger(__name__)


def run_classification_experiment(
    train_df: pd.DataFrame,
    test_df: pd.DataFrame,
    strategy: str = 'count',
    config: Optional[AnalysisConfig] = None
) -> Dict:
    """
    Run one vectorize -> fit -> evaluate experiment.

    Steps:
    1. Create the vectorizer for the strategy and fit it on training text
    2. Transform test text with the same fitted vectorizer
    3. Check that train and test matrices share their columns
    4. Fit the classifier along its regularization path
    5. Score the test matrix by AUC

    Args:
        train_df: Training documents (text and label columns)
        test_df: Test documents
        strategy: 'count', 'hash' or 'tfidf'
        config: Analysis settings (defaults used when None)

    Returns:
        Dictionary with keys strategy, vectorizer, classifier, feature_names,
        cv_auc, best_C, test_auc, n_features, n_nonzero, converged,
        regularization_path

    Raises:
        FeatureMismatchError: If the test matrix does not match the training matrix

    Examples:
        >>> result = run_classification_experiment(train_df, test_df, strategy='tfidf')
        >>> result['test_auc']
    """
    if config is None:
        config = AnalysisConfig()

    logger.info("Running classification experiment: %s", strategy)

    vectorizer = create_vectorizer(strategy, config)
    X_train = fit_vectorizer(vectorizer, train_df['text'])
    X_test = transform_texts(vectorizer, test_df['text'])
    check_feature_alignment(X_train, X_test)
    logger.info("Document-term matrices: train %s, test %s", X_train.shape, X_test.shape)

    clf = AuthorshipClassifier(
        n_folds=config.n_folds,
        Cs=config.Cs,
        max_iter=config.max_iter,
        tol=config.tol,
        seed=config.seed
    )
    clf.fit(X_train, train_df['label'].to_numpy())
    test_auc = clf.score_auc(X_test, test_df['label'].to_numpy())
    logger.info("%s: CV AUC %.4f, test AUC %.4f", strategy, clf.max_cv_auc_, test_auc)

    return {
        'strategy': strategy,
        'vectorizer': vectorizer,
        'classifier': clf,
        'feature_names': get_feature_names(vectorizer),
        'cv_auc': clf.max_cv_auc_,
        'best_C': clf.best_C_,
        'test_auc': test_auc,
        'n_features': X_train.shape[1],
        'n_nonzero': clf.n_nonzero_,
        'converged': clf.converged_,
        'regularization_path': clf.regularization_path_,
    }


def compare_strategies(
    train_df: pd.DataFrame,
    test_df: pd.DataFrame,
    config: Optional[AnalysisConfig] = None,
    strategies: Optional[List[str]] = None
) -> Tuple[pd.DataFrame, Dict[str, Dict]]:
    """
    Run the classification experiment once per vectorization strategy.

    Returns:
        Tuple of (summary DataFrame with one row per strategy, dict of full
        results keyed by strategy)
    """
    if strategies is None:
        strategies = VECTORIZER_STRATEGIES

    results = {}
    for strategy in tqdm(strategies, desc="Strategies"):
        results[strategy] = run_classification_experiment(train_df, test_df, strategy, config)

    summary = pd.DataFrame([
        {
            'strategy': strategy,
            'cv_auc': result['cv_auc'],
            'test_auc': result['test_auc'],
            'best_C': result['best_C'],
            'n_features': result['n_features'],
            'n_nonzero': result['n_nonzero'],
            'converged': result['converged'],
        }
        for strategy, result in results.items()
    ])

    return summary, results


def save_classification_results(
    result: Dict,
    config: Optional[AnalysisConfig] = None,
    output_dir: str = str(RESULTS_DIR)
) -> str:
    """
    Save one experiment result and its fitted objects to a pickle file.

    Args:
        result: Dictionary returned by run_classification_experiment()
        config: Settings used for the run (stored alongside the result)
        output_dir: Directory to save results

    Returns:
        Path to saved pickle file (``<output_dir>/<strategy>.pkl``)
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    filepath = output_path / f"{result['strategy']}.pkl"

    data = dict(result)
    data['config'] = config.to_dict() if config is not None else None

    with open(filepath, 'wb') as f:
        pickle.dump(data, f, protocol=4)

    return str(filepath)


def load_classification_results(filepath: str) -> dict:
    """
    Load classification results from a pickle file.

    Examples:
        >>> data = load_classification_results('data/classifier_results/count.pkl')
        >>> data['test_auc']
    """
    with open(filepath, 'rb') as f:
        data = pickle.load(f)

    return data
