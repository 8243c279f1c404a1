"""Tests for the L1 logistic regression authorship classifier (NO MOCKS)."""

import numpy as np
import pytest
from sklearn.exceptions import NotFittedError

from bow_stylometry.classification import (
    AuthorshipClassifier,
    compute_auc,
    create_count_vectorizer,
    fit_vectorizer,
    get_feature_names,
    transform_texts,
)
from bow_stylometry.core import FeatureMismatchError
from bow_stylometry.corpus import split_documents
from conftest import make_corpus


def _matrices(corpus, seed=42):
    train_df, test_df = split_documents(corpus, train_size=0.8, seed=seed, stratify=True)
    vectorizer = create_count_vectorizer()
    X_train = fit_vectorizer(vectorizer, train_df['text'])
    X_test = transform_texts(vectorizer, test_df['text'])
    return vectorizer, X_train, train_df['label'].to_numpy(), X_test, test_df['label'].to_numpy()


class TestComputeAuc:
    """Test the AUC metric."""

    def test_perfect_ranking(self):
        assert compute_auc([0, 0, 1, 1], [0.1, 0.2, 0.8, 0.9]) == 1.0

    def test_reversed_ranking(self):
        assert compute_auc([0, 0, 1, 1], [0.9, 0.8, 0.2, 0.1]) == 0.0

    def test_ties_count_half(self):
        assert compute_auc([0, 1], [0.5, 0.5]) == 0.5

    def test_single_class_raises(self):
        with pytest.raises(ValueError):
            compute_auc([1, 1, 1], [0.2, 0.4, 0.6])


class TestAuthorshipClassifier:
    """Test fitting along the regularization path."""

    def test_separable_corpus(self):
        corpus = make_corpus(n_docs=80, author_share=1.0)
        _, X_train, y_train, X_test, y_test = _matrices(corpus)

        clf = AuthorshipClassifier(n_folds=4).fit(X_train, y_train)

        assert clf.max_cv_auc_ == pytest.approx(1.0)
        assert clf.score_auc(X_test, y_test) > 0.95

    def test_auc_range(self, corpus):
        _, X_train, y_train, X_test, y_test = _matrices(corpus)
        clf = AuthorshipClassifier(n_folds=4).fit(X_train, y_train)

        assert 0.0 <= clf.max_cv_auc_ <= 1.0
        assert 0.0 <= clf.score_auc(X_test, y_test) <= 1.0

        proba = clf.predict_proba(X_test)
        assert proba.shape == (X_test.shape[0],)
        assert ((proba >= 0) & (proba <= 1)).all()
        assert set(clf.predict(X_test)) <= {0, 1}

    def test_score_on_one_author_split_raises(self, corpus):
        _, X_train, y_train, X_test, y_test = _matrices(corpus)
        clf = AuthorshipClassifier(n_folds=4).fit(X_train, y_train)

        only_second = y_test == 1
        with pytest.raises(ValueError):
            clf.score_auc(X_test[only_second], y_test[only_second])

    def test_regularization_path(self, corpus):
        _, X_train, y_train, _, _ = _matrices(corpus)
        clf = AuthorshipClassifier(n_folds=4, Cs=10).fit(X_train, y_train)
        path = clf.regularization_path_

        assert list(path.columns) == ['C', 'log_C', 'mean_auc', 'std_auc', 'n_nonzero']
        assert len(path) == 10
        assert path['C'].is_monotonic_increasing
        np.testing.assert_allclose(path['log_C'], np.log(path['C']))

        # Best strength is the one with the highest mean fold AUC
        assert clf.max_cv_auc_ == pytest.approx(path['mean_auc'].max())
        assert clf.best_C_ in path['C'].tolist()

        # Strongest penalty keeps no more coefficients than the weakest
        assert path['n_nonzero'].iloc[0] <= path['n_nonzero'].iloc[-1]

    def test_explicit_strength_grid(self, corpus):
        _, X_train, y_train, _, _ = _matrices(corpus)
        clf = AuthorshipClassifier(n_folds=3, Cs=[0.1, 1.0, 10.0]).fit(X_train, y_train)
        assert clf.regularization_path_['C'].tolist() == [0.1, 1.0, 10.0]

    def test_reproducible(self, corpus):
        _, X_train, y_train, X_test, _ = _matrices(corpus)
        clf1 = AuthorshipClassifier(seed=5).fit(X_train, y_train)
        clf2 = AuthorshipClassifier(seed=5).fit(X_train, y_train)

        assert clf1.best_C_ == clf2.best_C_
        np.testing.assert_allclose(clf1.predict_proba(X_test), clf2.predict_proba(X_test))

    def test_convergence_recorded(self, corpus):
        _, X_train, y_train, _, _ = _matrices(corpus)
        clf = AuthorshipClassifier().fit(X_train, y_train)

        assert isinstance(clf.converged_, bool)
        assert 0 < clf.n_iter_max_ <= clf.max_iter

    def test_non_convergence_reported(self, corpus):
        _, X_train, y_train, _, _ = _matrices(corpus)
        clf = AuthorshipClassifier(max_iter=1).fit(X_train, y_train)

        # Still produces a usable model, but flags it
        assert clf.converged_ is False
        assert clf.best_C_ is not None

    def test_mismatched_test_matrix(self, corpus):
        _, X_train, y_train, _, _ = _matrices(corpus)
        clf = AuthorshipClassifier().fit(X_train, y_train)

        other = create_count_vectorizer()
        X_other = fit_vectorizer(other, ["completely different vocabulary here"])
        with pytest.raises(FeatureMismatchError):
            clf.predict_proba(X_other)
        with pytest.raises(FeatureMismatchError):
            clf.score_auc(X_other, [0])

    def test_single_class_rejected(self, corpus):
        _, X_train, _, _, _ = _matrices(corpus)
        with pytest.raises(ValueError):
            AuthorshipClassifier().fit(X_train, np.zeros(X_train.shape[0], dtype=int))

    def test_unfitted(self):
        clf = AuthorshipClassifier()
        with pytest.raises(NotFittedError):
            clf.predict_proba(np.zeros((1, 3)))

    def test_invalid_settings(self):
        with pytest.raises(ValueError):
            AuthorshipClassifier(n_folds=1)
        with pytest.raises(ValueError):
            AuthorshipClassifier(solver='lbfgs')


class TestTopFeatures:
    """Test coefficient ranking."""

    def test_author_words_ranked(self, corpus):
        vectorizer, X_train, y_train, _, _ = _matrices(corpus)
        clf = AuthorshipClassifier().fit(X_train, y_train)
        features = clf.top_features(get_feature_names(vectorizer))

        assert list(features.columns) == ['term', 'coefficient', 'label']
        assert len(features) == clf.n_nonzero_
        assert (features['coefficient'] != 0).all()
        assert features['coefficient'].abs().is_monotonic_decreasing

        # Sign of a coefficient decides which author it points to
        assert (features.loc[features['coefficient'] > 0, 'label'] == 1).all()
        assert (features.loc[features['coefficient'] < 0, 'label'] == 0).all()

    def test_top_n(self, corpus):
        vectorizer, X_train, y_train, _, _ = _matrices(corpus)
        clf = AuthorshipClassifier().fit(X_train, y_train)
        assert len(clf.top_features(get_feature_names(vectorizer), n=3)) == min(3, clf.n_nonzero_)

    def test_wrong_name_count(self, corpus):
        _, X_train, y_train, _, _ = _matrices(corpus)
        clf = AuthorshipClassifier().fit(X_train, y_train)
        with pytest.raises(FeatureMismatchError):
            clf.top_features(['only', 'two'])
