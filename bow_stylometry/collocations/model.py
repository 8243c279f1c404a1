"""Adjacent-token collocation mining with iterative refit and pruning."""

import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

import numpy as np
import pandas as pd
from gensim.models.phrases import Phrases
from tqdm import tqdm

from bow_stylometry.text import resolve_stop_words, tokenize

logger = logging.getLogger(__name__)

STAT_COLUMNS = ['prefix', 'suffix', 'n_i', 'n_j', 'n_ij', 'pmi', 'lfmd', 'gensim']

# Joins the two halves of a pair in the phrase vocabularies. Word tokens never
# contain whitespace, so a key always splits back into exactly one pair even
# when a half is itself a compound token (``new_york city``).
_KEY_SEP = ' '


def pmi_scorer(worda_count, wordb_count, bigram_count, len_vocab, min_count, corpus_word_count):
    """Pointwise mutual information, in the scoring signature gensim expects."""
    if bigram_count < min_count:
        return -np.inf
    return float(np.log2(bigram_count * corpus_word_count / (worda_count * wordb_count)))


def lfmd_scorer(worda_count, wordb_count, bigram_count, len_vocab, min_count, corpus_word_count):
    """Log-frequency biased mutual dependency."""
    if bigram_count < min_count:
        return -np.inf
    return float(
        np.log2(bigram_count ** 2 / (worda_count * wordb_count))
        + np.log2(bigram_count / corpus_word_count)
    )


def gensim_scorer(worda_count, wordb_count, bigram_count, len_vocab, min_count, corpus_word_count):
    """Frequency-ratio score of Mikolov et al., scaled by the token total."""
    if bigram_count < min_count:
        return -np.inf
    return (bigram_count - min_count) * corpus_word_count / (worda_count * wordb_count)


def _empty_stat() -> pd.DataFrame:
    return pd.DataFrame({
        'prefix': pd.Series(dtype=object),
        'suffix': pd.Series(dtype=object),
        'n_i': pd.Series(dtype=np.int64),
        'n_j': pd.Series(dtype=np.int64),
        'n_ij': pd.Series(dtype=np.int64),
        'pmi': pd.Series(dtype=float),
        'lfmd': pd.Series(dtype=float),
        'gensim': pd.Series(dtype=float),
    })


def _sort_stat(stat: pd.DataFrame) -> pd.DataFrame:
    """Descending pmi, then descending n_ij, then prefix and suffix."""
    return stat.sort_values(
        ['pmi', 'n_ij', 'prefix', 'suffix'],
        ascending=[False, False, True, True],
        kind='mergesort'
    ).reset_index(drop=True)


class CollocationModel:
    """
    Running table of adjacent-token collocation statistics.

    Counting and phrase detection are done by gensim ``Phrases`` models, one
    per refit pass: the first counts the raw token stream, each later one the
    stream with the earlier passes' phrases already merged (bigrams, then
    trigrams, ...). The model owns its statistics table. ``partial_fit`` adds
    counts from more documents to every pass, ``prune`` deletes rows in place
    (permanently), and ``collocation_stat`` hands out a copy, so a caller
    never mutates the table directly.

    For a candidate pair with prefix count ``n_i``, suffix count ``n_j``,
    pair count ``n_ij`` and ``N`` tokens in total:

    - ``pmi = log2(n_ij * N / (n_i * n_j))``
    - ``lfmd = log2(n_ij ** 2 / (n_i * n_j)) + log2(n_ij / N)``
    - ``gensim = (n_ij - collocation_count_min) * N / (n_i * n_j)``

    Rows are ordered by descending pmi, then descending n_ij, then prefix and
    suffix alphabetically.

    Examples:
        >>> model = CollocationModel(collocation_count_min=20)
        >>> model.fit(texts, n_iter=2)
        >>> model.prune(pmi_min=5, gensim_min=0, lfmd_min=-25)
        >>> model.transform(["he moved to new york city"])
        [['he', 'moved', 'to', 'new_york_city']]
    """

    def __init__(
        self,
        collocation_count_min: int = 50,
        pmi_min: float = 0.0,
        gensim_min: float = 0.0,
        lfmd_min: float = -np.inf,
        vocabulary: Optional[Iterable[str]] = None,
        stopwords: Optional[Iterable[str]] = None,
        sep: str = '_'
    ):
        """
        Args:
            collocation_count_min: Minimum number of times a pair must occur
            pmi_min: Minimum pointwise mutual information kept on refit
            gensim_min: Minimum frequency-ratio score kept on refit
            lfmd_min: Minimum log-frequency-biased mutual dependence kept on refit
            vocabulary: Optional set of tokens pairs may be built from
            stopwords: None, 'english' or words that never start or end a pair
            sep: Separator joining the parts of a compound token
        """
        if collocation_count_min < 1:
            raise ValueError(f"collocation_count_min must be positive, got: {collocation_count_min}")

        self.collocation_count_min = collocation_count_min
        self.pmi_min = pmi_min
        self.gensim_min = gensim_min
        self.lfmd_min = lfmd_min
        self.vocabulary = frozenset(vocabulary) if vocabulary is not None else None
        self.stopwords = resolve_stop_words(stopwords)
        self.sep = sep

        self._pruned: Set[Tuple[str, str]] = set()
        self._reset_layers()

    # ------------------------------------------------------------------
    # Phrase layers
    # ------------------------------------------------------------------

    def _reset_layers(self):
        # One gensim model per pass, its frozen phrase table and its rows
        self._layers: List[Phrases] = []
        self._frozen = []
        self._layer_stats: List[pd.DataFrame] = []
        self._stat = _empty_stat()

    def _add_layer(self):
        self._layers.append(Phrases(
            min_count=self.collocation_count_min,
            threshold=-np.inf,
            delimiter=_KEY_SEP,
            scoring=pmi_scorer
        ))
        self._frozen.append(None)
        self._layer_stats.append(_empty_stat())

    def _tokens(self, document) -> List[str]:
        if isinstance(document, str):
            return tokenize(document)
        return list(document)

    def _eligible(self, token: str) -> bool:
        if token in self.stopwords:
            return False
        if self.vocabulary is not None:
            return all(part in self.vocabulary for part in token.split(self.sep))
        return True

    def _apply_layer(self, depth: int, tokens: List[str]) -> List[str]:
        frozen = self._frozen[depth]
        if frozen is None or not frozen.phrasegrams:
            return list(tokens)
        return [token.replace(_KEY_SEP, self.sep) for token in frozen[tokens]]

    def _merge(self, tokens: List[str], n_layers: Optional[int] = None) -> List[str]:
        """Run tokens through the first ``n_layers`` phrase layers in order."""
        n_layers = len(self._layers) if n_layers is None else n_layers
        for depth in range(n_layers):
            tokens = self._apply_layer(depth, tokens)
        return tokens

    def _count(self, depth: int, token_lists: List[List[str]], show_progress: bool = False):
        desc = f"Counting pairs (pass {depth + 1})"
        self._layers[depth].add_vocab(tqdm(token_lists, desc=desc, disable=not show_progress))
        self._rebuild_layer(depth)

    # ------------------------------------------------------------------
    # Statistics table
    # ------------------------------------------------------------------

    def _rebuild_layer(self, depth: int):
        """Recompute one pass's rows from its running counts."""
        phrases = self._layers[depth]
        frozen = phrases.freeze()
        known = set()
        for stat in self._layer_stats[:depth]:
            known.update(zip(stat['prefix'], stat['suffix']))

        vocab = phrases.vocab
        N = phrases.corpus_word_count
        min_count = self.collocation_count_min
        rows = []
        for key, pmi in frozen.phrasegrams.items():
            parts = key.split(_KEY_SEP)
            if len(parts) != 2:
                continue
            pair = (parts[0], parts[1])
            if pair in self._pruned or pair in known:
                continue
            if not (self._eligible(pair[0]) and self._eligible(pair[1])):
                continue

            counts = dict(
                worda_count=vocab[pair[0]],
                wordb_count=vocab[pair[1]],
                bigram_count=vocab[key],
                len_vocab=len(vocab),
                min_count=min_count,
                corpus_word_count=N
            )
            lfmd = lfmd_scorer(**counts)
            gensim = gensim_scorer(**counts)
            if pmi < self.pmi_min or gensim < self.gensim_min or lfmd < self.lfmd_min:
                continue
            rows.append((
                pair[0], pair[1], counts['worda_count'], counts['wordb_count'], counts['bigram_count'],
                pmi, lfmd, gensim
            ))

        stat = pd.DataFrame(rows, columns=STAT_COLUMNS) if rows else _empty_stat()
        stat = stat.astype({'n_i': np.int64, 'n_j': np.int64, 'n_ij': np.int64})
        self._layer_stats[depth] = stat
        self._set_frozen(depth, frozen)

    def _set_frozen(self, depth: int, frozen):
        # Only surviving rows merge on transform
        stat = self._layer_stats[depth]
        kept = {a + _KEY_SEP + b for a, b in zip(stat['prefix'], stat['suffix'])}
        frozen.phrasegrams = {
            key: score for key, score in frozen.phrasegrams.items() if key in kept
        }
        self._frozen[depth] = frozen

    def _collect(self):
        frames = [stat for stat in self._layer_stats if len(stat)]
        stat = pd.concat(frames, ignore_index=True) if frames else _empty_stat()
        self._stat = _sort_stat(stat[STAT_COLUMNS])

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def partial_fit(self, documents: Iterable, show_progress: bool = False) -> "CollocationModel":
        """
        Add counts from more documents to the running statistics.

        Counts are never reset here, so fitting chunk A and then chunk B gives
        the same counts as fitting A and B together. Every refit pass of an
        earlier ``fit`` keeps counting: the first on the raw tokens, each later
        one on the tokens merged by the passes before it.

        Args:
            documents: Texts (tokenized with the shared word tokenizer) or
                pre-tokenized lists of tokens
            show_progress: Show a progress bar

        Returns:
            self
        """
        token_lists = [self._tokens(d) for d in documents]
        if not self._layers:
            self._add_layer()

        for depth in range(len(self._layers)):
            if depth:
                token_lists = [self._apply_layer(depth - 1, tokens) for tokens in token_lists]
            self._count(depth, token_lists, show_progress=show_progress)

        self._collect()
        logger.debug("Collocation table has %d rows after partial fit (%d tokens)", len(self._stat), self.n_tokens)
        return self

    def fit(self, documents: Iterable, n_iter: int = 1, show_progress: bool = False) -> "CollocationModel":
        """
        Fit from scratch with ``n_iter`` refit passes.

        After each pass the surviving collocations are frozen into compound
        tokens so the next pass can find longer phrases (``new_york`` +
        ``city``). Stops early when a pass finds nothing new.

        Returns:
            self
        """
        if n_iter < 1:
            raise ValueError(f"n_iter must be positive, got: {n_iter}")

        token_lists = [self._tokens(d) for d in documents]

        self._pruned = set()
        self._reset_layers()

        for iteration in range(n_iter):
            if iteration:
                token_lists = [self._apply_layer(iteration - 1, tokens) for tokens in token_lists]
            self._add_layer()
            self._count(iteration, token_lists, show_progress=show_progress)

            n_new = len(self._layer_stats[iteration])
            logger.info("Collocation pass %d/%d: %d new collocations", iteration + 1, n_iter, n_new)
            if n_new == 0:
                if iteration:
                    # An empty pass adds nothing to transform
                    self._layers.pop()
                    self._frozen.pop()
                    self._layer_stats.pop()
                break

        self._collect()
        return self

    def prune(
        self,
        pmi_min: Optional[float] = None,
        gensim_min: Optional[float] = None,
        lfmd_min: Optional[float] = None
    ) -> "CollocationModel":
        """
        Delete every row failing any of the given thresholds.

        Deletion is permanent: a pruned pair is never re-admitted by later
        ``partial_fit`` calls. Pruning again with the same thresholds changes
        nothing. A threshold left as None is not applied.

        Returns:
            self
        """
        n_removed = 0
        for depth, stat in enumerate(self._layer_stats):
            fails = pd.Series(False, index=stat.index)
            if pmi_min is not None:
                fails |= stat['pmi'] < pmi_min
            if gensim_min is not None:
                fails |= stat['gensim'] < gensim_min
            if lfmd_min is not None:
                fails |= stat['lfmd'] < lfmd_min
            if not fails.any():
                continue

            self._pruned |= set(zip(stat.loc[fails, 'prefix'], stat.loc[fails, 'suffix']))
            n_removed += int(fails.sum())
            self._layer_stats[depth] = stat[~fails].reset_index(drop=True)
            self._set_frozen(depth, self._frozen[depth])

        self._collect()
        logger.info("Pruned %d collocations, %d remain", n_removed, len(self._stat))
        return self

    def transform(self, documents: Iterable) -> List[List[str]]:
        """
        Tokenize documents and merge surviving collocations into compound tokens.

        Returns:
            One token list per document
        """
        return [self.analyze(d) for d in documents]

    def analyze(self, document) -> List[str]:
        """Tokens of a single document with collocations merged."""
        return self._merge(self._tokens(document))

    def as_analyzer(self, stop_words=None):
        """
        Analyzer for scikit-learn vectorizers (``CountVectorizer(analyzer=...)``).

        Args:
            stop_words: None, 'english' or words dropped after merging

        Returns:
            Callable mapping a document to its collocation-aware tokens
        """
        return CollocationAnalyzer(self, resolve_stop_words(stop_words))

    @property
    def collocation_stat(self) -> pd.DataFrame:
        """Copy of the statistics table."""
        return self._stat.copy()

    @property
    def collocations(self) -> List[str]:
        """Surviving collocations as compound tokens, in table order."""
        return [a + self.sep + b for a, b in zip(self._stat['prefix'], self._stat['suffix'])]

    @property
    def pair_counts(self) -> Dict[Tuple[str, str], int]:
        """Candidate adjacent-pair counts of the raw token stream."""
        if not self._layers:
            return {}
        counts = {}
        for key, count in self._layers[0].vocab.items():
            parts = key.split(_KEY_SEP)
            if len(parts) == 2 and self._eligible(parts[0]) and self._eligible(parts[1]):
                counts[(parts[0], parts[1])] = count
        return counts

    @property
    def unigram_counts(self) -> Dict[str, int]:
        if not self._layers:
            return {}
        return {key: count for key, count in self._layers[0].vocab.items() if _KEY_SEP not in key}

    @property
    def n_tokens(self) -> int:
        return self._layers[0].corpus_word_count if self._layers else 0

    def __len__(self):
        return len(self._stat)


class CollocationAnalyzer:
    """Picklable document -> tokens callable backed by a CollocationModel."""

    def __init__(self, model: CollocationModel, stop_words=frozenset()):
        self.model = model
        self.stop_words = stop_words

    def __call__(self, document) -> List[str]:
        return [t for t in self.model.analyze(document) if t not in self.stop_words]
