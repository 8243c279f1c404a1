"""Exceptions raised by the analysis pipeline."""


class BowStylometryError(Exception):
    """Base class for pipeline errors."""


class CorpusUnavailableError(BowStylometryError):
    """The text repository could not be reached or returned no book."""

    def __init__(self, gutenberg_id, reason):
        self.gutenberg_id = gutenberg_id
        self.reason = reason
        super().__init__(f"Could not fetch Gutenberg book {gutenberg_id}: {reason}")


class FeatureMismatchError(BowStylometryError, ValueError):
    """Train and test document-term matrices do not share a feature space."""

    def __init__(self, n_train_features, n_test_features):
        self.n_train_features = n_train_features
        self.n_test_features = n_test_features
        super().__init__(
            f"Feature mismatch: model was fitted on {n_train_features} columns, "
            f"got a matrix with {n_test_features} columns. "
            "Transform test text with the vectorizer fitted on the training set."
        )
