from .constants import (
    BOOKS,
    GUTENBERG_MIRROR,
    HASH_FEATURES,
    HASH_NGRAM_RANGE,
    UNITS,
)


class AnalysisConfig:
    """
    Settings for one run of the analysis.

    Every solver limit and threshold the pipeline uses lives here so that a
    run is fully described by its config (and the config is stored next to the
    results).
    """

    def __init__(
        self,
        books=None,
        unit="line",
        train_size=0.8,
        stratify=False,
        seed=42,
        n_folds=4,
        Cs=20,
        max_iter=1000,
        tol=1e-4,
        hash_features=HASH_FEATURES,
        hash_ngram_range=HASH_NGRAM_RANGE,
        min_df=1,
        max_df=1.0,
        max_features=None,
        stop_words=None,
        tfidf_norm=None,
        collocation_count_min=50,
        collocation_n_iter=2,
        prune_pmi_min=5.0,
        prune_gensim_min=0.0,
        prune_lfmd_min=-25.0,
        n_topics=20,
        lda_max_iter=50,
        mirror=GUTENBERG_MIRROR,
        timeout=30,
    ):
        if books is None:
            books = dict(BOOKS)
        if len(books) != 2:
            raise ValueError(f"Exactly two books are needed for a binary classifier, got {len(books)}")
        if unit not in UNITS:
            raise ValueError(f"Invalid unit: {unit}. Must be one of {UNITS}")

        if isinstance(train_size, bool) or not isinstance(train_size, (int, float)):
            raise ValueError(f"train_size must be a number, got: {train_size!r}")
        if isinstance(train_size, float) and not 0.0 < train_size < 1.0:
            raise ValueError(f"train_size as a fraction must be in (0, 1), got: {train_size}")
        if isinstance(train_size, int) and train_size <= 0:
            raise ValueError(f"train_size as a row count must be positive, got: {train_size}")

        if n_folds < 2:
            raise ValueError(f"n_folds must be at least 2, got: {n_folds}")
        if max_iter <= 0:
            raise ValueError(f"max_iter must be positive, got: {max_iter}")
        if n_topics < 1:
            raise ValueError(f"n_topics must be positive, got: {n_topics}")
        if collocation_n_iter < 1:
            raise ValueError(f"collocation_n_iter must be positive, got: {collocation_n_iter}")

        self.books = dict(books)
        self.unit = unit
        self.train_size = train_size
        self.stratify = stratify
        self.seed = seed
        self.n_folds = n_folds
        self.Cs = Cs
        self.max_iter = max_iter
        self.tol = tol
        self.hash_features = hash_features
        self.hash_ngram_range = tuple(hash_ngram_range)
        self.min_df = min_df
        self.max_df = max_df
        self.max_features = max_features
        self.stop_words = stop_words
        self.tfidf_norm = tfidf_norm
        self.collocation_count_min = collocation_count_min
        self.collocation_n_iter = collocation_n_iter
        self.prune_pmi_min = prune_pmi_min
        self.prune_gensim_min = prune_gensim_min
        self.prune_lfmd_min = prune_lfmd_min
        self.n_topics = n_topics
        self.lda_max_iter = lda_max_iter
        self.mirror = mirror
        self.timeout = timeout

    @property
    def authors(self):
        """Author names in label order."""
        return list(self.books)

    def to_dict(self):
        return dict(vars(self))

    @classmethod
    def from_dict(cls, settings):
        return cls(**settings)

    def __repr__(self):
        return f"AnalysisConfig({', '.join(f'{k}={v!r}' for k, v in vars(self).items())})"
