from pathlib import Path


# Base paths (relative to the working directory the analysis is run from)
DATA_DIR = Path("data")
RAW_DATA_DIR = DATA_DIR / "raw"
RESULTS_DIR = DATA_DIR / "classifier_results"

# Corpus: author -> Project Gutenberg id, in label order (0, 1)
BOOKS = {
    "austen": 1342,  # Pride and Prejudice
    "dickens": 98,  # A Tale of Two Cities
}

GUTENBERG_MIRROR = "https://www.gutenberg.org/cache/epub"
GUTENBERG_START = "*** START OF"
GUTENBERG_END = "*** END OF"

# Text units a book can be split into
UNITS = ["line", "paragraph"]

# Vectorization strategies
VECTORIZER_STRATEGIES = ["count", "hash", "tfidf"]

# Hashed vectorizer defaults
HASH_FEATURES = 2 ** 14
HASH_NGRAM_RANGE = (1, 2)
