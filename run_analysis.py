#!/usr/bin/env python
"""
Command-line runner for the bag-of-words stylometry analysis.
"""

import sys
import argparse
import logging
from pathlib import Path

# Add package to path
sys.path.insert(0, str(Path(__file__).parent))

# Set matplotlib to non-interactive backend
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from bow_stylometry.cli_utils import format_header, format_table, safe_print
from bow_stylometry.core import AnalysisConfig, BowStylometryError
from bow_stylometry.core.constants import BOOKS, GUTENBERG_MIRROR, RAW_DATA_DIR, VECTORIZER_STRATEGIES

logger = logging.getLogger(__name__)


def train_size_arg(value):
    """Parse --train-size as a fraction (contains a '.') or a row count."""
    try:
        return float(value) if '.' in value else int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"train size must be a fraction or a row count, got: {value}")


def build_parser():
    parser = argparse.ArgumentParser(
        description='Bag-of-words stylometry: authorship classification, collocations and topics',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                          # Compare all vectorization strategies
  %(prog)s --strategy tfidf         # Only the TF-IDF strategy
  %(prog)s --train-size 5000        # Fixed row-count split instead of a fraction
  %(prog)s --topics                 # Also mine collocations and fit topics
  %(prog)s --list                   # List strategies and figures
        """
    )

    parser.add_argument(
        '--strategy', '-s',
        choices=VECTORIZER_STRATEGIES + ['all'],
        default='all',
        help='Vectorization strategy to run (default: all)'
    )
    parser.add_argument('--seed', type=int, default=42, help='Random seed (default: 42)')
    parser.add_argument('--folds', type=int, default=4, help='Cross-validation folds (default: 4)')
    parser.add_argument(
        '--train-size',
        type=train_size_arg,
        default=0.8,
        help='Training fraction (e.g. 0.8) or absolute row count (e.g. 5000) (default: 0.8)'
    )
    parser.add_argument('--stratify', action='store_true', help='Keep the author ratio in both splits')
    parser.add_argument(
        '--unit',
        choices=['line', 'paragraph'],
        default='line',
        help='Document unit a book is split into (default: line)'
    )
    parser.add_argument(
        '--cache-dir',
        default=str(RAW_DATA_DIR),
        help=f'Directory caching downloaded books (default: {RAW_DATA_DIR})'
    )
    parser.add_argument(
        '--mirror',
        default=GUTENBERG_MIRROR,
        help='Gutenberg mirror base URL (default: %(default)s)'
    )
    parser.add_argument('--timeout', type=float, default=30, help='Download timeout in seconds (default: 30)')
    parser.add_argument(
        '--output', '-o',
        default='output',
        help='Output directory for results and figures (default: output)'
    )
    parser.add_argument('--topics', action='store_true', help='Mine collocations and fit a topic model')
    parser.add_argument('--n-topics', type=int, default=20, help='Number of topics (default: 20)')
    parser.add_argument('--no-figures', action='store_true', help='Skip figure generation')
    parser.add_argument('--list', '-l', action='store_true', help='List strategies and figures')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    return parser


def list_available():
    safe_print("\nCorpus:")
    for label, (author, gutenberg_id) in enumerate(BOOKS.items()):
        safe_print(f"  label {label}: {author} (Gutenberg #{gutenberg_id})")
    safe_print("\nVectorization strategies:")
    safe_print("  count - Raw term counts over the training vocabulary")
    safe_print("  hash  - Hashed 1- and 2-gram counts (2^14 buckets)")
    safe_print("  tfidf - Term counts reweighted by inverse document frequency")
    safe_print("\nFigures:")
    safe_print("  regularization_path_<strategy>.pdf - CV AUC along the L1 path")
    safe_print("  strategy_comparison.pdf            - CV and test AUC per strategy")
    safe_print("  wordcloud_<author>.pdf             - Terms the count model relies on")
    safe_print("  topic_heatmap.pdf                  - Mean topic weight per author (--topics)")


def run(args):
    from bow_stylometry.classification import (
        compare_strategies,
        create_count_vectorizer,
        fit_vectorizer,
        save_classification_results,
        vocabulary_table,
    )
    from bow_stylometry.corpus import drop_empty_documents, load_corpus, split_documents

    config = AnalysisConfig(
        unit=args.unit,
        train_size=args.train_size,
        stratify=args.stratify,
        seed=args.seed,
        n_folds=args.folds,
        n_topics=args.n_topics,
        mirror=args.mirror,
        timeout=args.timeout
    )
    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)

    # Corpus
    safe_print("\n" + "=" * 60)
    safe_print("Loading Corpus")
    safe_print("=" * 60)
    corpus = load_corpus(
        config.books,
        unit=config.unit,
        mirror=config.mirror,
        cache_dir=args.cache_dir,
        timeout=config.timeout
    )
    corpus = drop_empty_documents(corpus)
    train_df, test_df = split_documents(
        corpus,
        train_size=config.train_size,
        seed=config.seed,
        stratify=config.stratify
    )
    safe_print(f"  {len(corpus)} documents: {len(train_df)} train, {len(test_df)} test")
    for (author, title), n in corpus.groupby(['author', 'title']).size().items():
        safe_print(f"  {author}: {title} ({n} {config.unit}s)")

    # Vocabulary summary
    vocab_vectorizer = create_count_vectorizer()
    X_vocab = fit_vectorizer(vocab_vectorizer, train_df['text'])
    vocab = vocabulary_table(vocab_vectorizer, X_vocab)
    safe_print(f"\nTraining vocabulary: {len(vocab)} terms")
    safe_print(format_table(vocab, max_rows=10))

    # Classification
    safe_print("\n" + "=" * 60)
    safe_print("Classification")
    safe_print("=" * 60)
    strategies = VECTORIZER_STRATEGIES if args.strategy == 'all' else [args.strategy]
    summary, results = compare_strategies(train_df, test_df, config, strategies)
    safe_print(format_table(summary))

    for strategy, result in results.items():
        path = save_classification_results(result, config, output_dir=str(output_dir / 'classifier_results'))
        safe_print(f"  ✓ Saved {strategy} results: {path}")
        if not result['converged']:
            safe_print(f"  ⚠ {strategy}: solver hit max_iter={config.max_iter}")

    if not args.no_figures:
        generate_classification_figures(summary, results, config, output_dir)

    # Collocations and topics
    if args.topics:
        from bow_stylometry.topics import run_topic_experiment

        safe_print("\n" + "=" * 60)
        safe_print("Collocations and Topics")
        safe_print("=" * 60)
        topic_result = run_topic_experiment(train_df, config)
        safe_print(f"\nCollocations mined from {topic_result['author']}: {len(topic_result['collocation_stat'])}")
        safe_print(format_table(topic_result['collocation_stat'], max_rows=15))
        top_terms = topic_result['top_terms']
        safe_print(f"\nTop terms of {config.n_topics} topics:")
        for topic, terms in top_terms.groupby('topic')['term']:
            safe_print(f"  {topic:>2}: {' '.join(terms)}")

        if not args.no_figures:
            from bow_stylometry.visualization import generate_topic_heatmap_figure

            fig = generate_topic_heatmap_figure(
                topic_result['author_topics'],
                output_path=str(output_dir / 'topic_heatmap.pdf')
            )
            plt.close(fig)

    return 0


def generate_classification_figures(summary, results, config, output_dir):
    from bow_stylometry.visualization import (
        generate_regularization_path_figure,
        generate_strategy_comparison_figure,
        generate_word_cloud_figure,
    )

    figures = []
    for strategy, result in results.items():
        figures.append((
            f'Regularization path ({strategy})',
            lambda result=result, strategy=strategy: generate_regularization_path_figure(
                result['regularization_path'],
                best_C=result['best_C'],
                output_path=str(output_dir / f'regularization_path_{strategy}.pdf'),
                title=strategy
            )
        ))
    figures.append((
        'Strategy comparison',
        lambda: generate_strategy_comparison_figure(
            summary,
            output_path=str(output_dir / 'strategy_comparison.pdf')
        )
    ))
    if 'count' in results:
        features = results['count']['classifier'].top_features(results['count']['feature_names'])
        for label, author in enumerate(config.authors):
            figures.append((
                f'Word cloud ({author})',
                lambda label=label, author=author: generate_word_cloud_figure(
                    features,
                    label=label,
                    author=author,
                    color_index=label,
                    output_path=str(output_dir / f'wordcloud_{author}.pdf')
                )
            ))

    for description, generate_func in figures:
        try:
            fig = generate_func()
            plt.close(fig)
            safe_print(f"  ✓ {description}")
        except ValueError as e:
            safe_print(f"  ✗ {description}: {e}")


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    if args.list:
        list_available()
        return 0

    safe_print(format_header("Bag-of-Words Stylometry"))

    try:
        return run(args)
    except BowStylometryError as e:
        logger.error("%s", e)
        safe_print(f"\nERROR: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
