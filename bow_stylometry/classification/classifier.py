"""L1-regularized logistic regression for two-author attribution."""

import logging
import warnings
from typing import List, Optional

import numpy as np
import pandas as pd
from sklearn.exceptions import ConvergenceWarning, NotFittedError
from sklearn.linear_model import LogisticRegressionCV
from sklearn.metrics import roc_auc_score
from sklearn.model_selection import StratifiedKFold

from bow_stylometry.core.errors import FeatureMismatchError

logger = logging.getLogger(__name__)


def compute_auc(y_true, scores) -> float:
    """
    Area under the ROC curve of positive-class scores.

    Args:
        y_true: Binary labels
        scores: Score or probability of the positive class per document

    Returns:
        AUC in [0, 1]

    Raises:
        ValueError: If y_true contains a single class
    """
    classes = np.unique(y_true)
    if len(classes) < 2:
        raise ValueError(f"AUC needs both classes in y_true, got only: {classes.tolist()}")
    return float(roc_auc_score(y_true, scores))


class AuthorshipClassifier:
    """
    L1-penalized logistic regression with a cross-validated regularization path.

    A grid of ``Cs`` inverse regularization strengths is searched with
    stratified k-fold cross-validation scored by AUC. The strength with the
    highest mean fold AUC is selected and the model is refitted on all
    training documents with it.

    Attributes:
        model: Fitted sklearn LogisticRegressionCV
        classes_: Class labels (classes_[1] is the positive class)
        regularization_path_: DataFrame with C, log_C, mean_auc, std_auc, n_nonzero
        best_C_: Selected inverse regularization strength
        max_cv_auc_: Mean cross-validated AUC at best_C_
        converged_: False when the solver hit max_iter on any fit
        n_iter_max_: Largest iteration count used by the solver
        n_features_in_: Number of columns in the training matrix

    Examples:
        >>> clf = AuthorshipClassifier(n_folds=4)
        >>> clf.fit(X_train, y_train)
        >>> clf.max_cv_auc_, clf.best_C_
        >>> clf.score_auc(X_test, y_test)
    """

    def __init__(
        self,
        n_folds: int = 4,
        Cs=20,
        max_iter: int = 1000,
        tol: float = 1e-4,
        solver: str = 'liblinear',
        seed: int = 42
    ):
        """
        Args:
            n_folds: Number of cross-validation folds
            Cs: Number of strengths on a log grid between 1e-4 and 1e4, or an
                explicit list of strengths
            max_iter: Solver iteration budget per fit
            tol: Solver stopping tolerance
            solver: 'liblinear' or 'saga' (both support the L1 penalty)
            seed: Seed for fold shuffling and the solver
        """
        if n_folds < 2:
            raise ValueError(f"n_folds must be at least 2, got: {n_folds}")
        if solver not in ('liblinear', 'saga'):
            raise ValueError(f"solver must be 'liblinear' or 'saga' for an L1 penalty, got: {solver}")

        self.n_folds = n_folds
        self.Cs = Cs
        self.max_iter = max_iter
        self.tol = tol
        self.solver = solver
        self.seed = seed

        self.model = None
        self.classes_ = None
        self.regularization_path_ = None
        self.best_C_ = None
        self.max_cv_auc_ = None
        self.converged_ = None
        self.n_iter_max_ = None
        self.n_features_in_ = None

    def fit(self, X, y):
        """
        Search the regularization path and fit the selected model.

        Args:
            X: Document-term matrix (n_documents x n_features)
            y: Binary labels (n_documents,)

        Returns:
            self
        """
        y = np.asarray(y)
        if len(np.unique(y)) != 2:
            raise ValueError(f"Expected two classes, got {len(np.unique(y))}")

        folds = StratifiedKFold(n_splits=self.n_folds, shuffle=True, random_state=self.seed)
        model = LogisticRegressionCV(
            Cs=self.Cs,
            cv=folds,
            penalty='l1',
            solver=self.solver,
            scoring='roc_auc',
            max_iter=self.max_iter,
            tol=self.tol,
            refit=True,
            random_state=self.seed
        )

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter('always', ConvergenceWarning)
            model.fit(X, y)

        convergence_warnings = []
        for w in caught:
            if issubclass(w.category, ConvergenceWarning):
                convergence_warnings.append(w)
            else:
                warnings.warn_explicit(w.message, w.category, w.filename, w.lineno)

        self.model = model
        self.classes_ = model.classes_
        self.n_features_in_ = X.shape[1]
        self.n_iter_max_ = int(np.max(model.n_iter_))
        self.converged_ = not convergence_warnings and self.n_iter_max_ < self.max_iter
        if not self.converged_:
            logger.warning(
                "Solver did not converge within max_iter=%d (largest iteration count %d, %d warnings); "
                "coefficients are the last iterate",
                self.max_iter, self.n_iter_max_, len(convergence_warnings)
            )

        self.regularization_path_ = self._build_path(model)
        best = self.regularization_path_['mean_auc'].idxmax()
        self.best_C_ = float(self.regularization_path_.loc[best, 'C'])
        self.max_cv_auc_ = float(self.regularization_path_.loc[best, 'mean_auc'])

        logger.info(
            "Max %d-fold CV AUC %.4f at C=%.4g (%d non-zero coefficients)",
            self.n_folds, self.max_cv_auc_, self.best_C_, self.n_nonzero_
        )
        return self

    def _build_path(self, model) -> pd.DataFrame:
        Cs = np.asarray(model.Cs_)
        n_Cs = len(Cs)

        # Binary problems store a single entry keyed by the positive class
        scores = np.asarray(next(iter(model.scores_.values()))).reshape(self.n_folds, n_Cs)
        paths = np.asarray(next(iter(model.coefs_paths_.values()))).reshape(self.n_folds, n_Cs, -1)
        if model.fit_intercept:
            paths = paths[:, :, :-1]
        n_nonzero = (paths != 0).sum(axis=2).mean(axis=0)

        return pd.DataFrame({
            'C': Cs,
            'log_C': np.log(Cs),
            'mean_auc': scores.mean(axis=0),
            'std_auc': scores.std(axis=0),
            'n_nonzero': n_nonzero,
        })

    def _check_fitted(self):
        if self.model is None:
            raise NotFittedError("Classifier must be fitted before use")

    def _check_features(self, X):
        self._check_fitted()
        if X.shape[1] != self.n_features_in_:
            raise FeatureMismatchError(self.n_features_in_, X.shape[1])

    @property
    def n_nonzero_(self) -> int:
        """Number of non-zero coefficients of the refitted model."""
        self._check_fitted()
        return int(np.count_nonzero(self.model.coef_))

    def predict_proba(self, X) -> np.ndarray:
        """
        Probability of the positive class (classes_[1]) per document.

        Raises:
            FeatureMismatchError: If X has a different number of columns than
                the training matrix
        """
        self._check_features(X)
        return self.model.predict_proba(X)[:, 1]

    def predict(self, X) -> np.ndarray:
        self._check_features(X)
        return self.model.predict(X)

    def score_auc(self, X, y) -> float:
        """AUC of the positive-class probabilities against true labels."""
        return compute_auc(np.asarray(y), self.predict_proba(X))

    def top_features(self, feature_names: List[str], n: Optional[int] = None) -> pd.DataFrame:
        """
        Non-zero coefficients ranked by magnitude.

        Positive coefficients point to classes_[1], negative ones to classes_[0].

        Args:
            feature_names: Names of the matrix columns
            n: Keep only the n largest by magnitude (None keeps all)

        Returns:
            DataFrame with columns term, coefficient, label
        """
        self._check_fitted()
        if len(feature_names) != self.n_features_in_:
            raise FeatureMismatchError(self.n_features_in_, len(feature_names))

        coef = self.model.coef_.ravel()
        nonzero = np.flatnonzero(coef)
        table = pd.DataFrame({
            'term': [feature_names[i] for i in nonzero],
            'coefficient': coef[nonzero],
        })
        table['label'] = np.where(table['coefficient'] > 0, self.classes_[1], self.classes_[0])
        table = table.reindex(table['coefficient'].abs().sort_values(ascending=False).index)
        table = table.reset_index(drop=True)
        if n is not None:
            table = table.head(n)
        return table
