"""Word tokenization shared by the vectorizers and the collocation miner."""

from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS, CountVectorizer


# Same pattern as the vectorizers so collocation tokens line up with vocabulary terms
TOKEN_PATTERN = r'(?u)\b\w+\b'

STOP_WORDS = frozenset(ENGLISH_STOP_WORDS)

_ANALYZERS = {
    lowercase: CountVectorizer(lowercase=lowercase, token_pattern=TOKEN_PATTERN).build_analyzer()
    for lowercase in (True, False)
}


def tokenize(text, lowercase=True):
    """
    Split text into word tokens.

    Uses the analyzer of a CountVectorizer configured like the ones in
    ``bow_stylometry.classification.vectorizer``, so a collocation's parts are
    always terms the vectorizers know.

    Args:
        text: Raw document text
        lowercase: Lower-case the text before splitting

    Returns:
        List of tokens

    Examples:
        >>> tokenize("It was the best of times")
        ['it', 'was', 'the', 'best', 'of', 'times']
    """
    return _ANALYZERS[bool(lowercase)](text)


def resolve_stop_words(stop_words):
    """Map a stop word setting (None, 'english' or an iterable) to a frozenset."""
    if stop_words is None:
        return frozenset()
    if stop_words == 'english':
        return STOP_WORDS
    return frozenset(stop_words)
