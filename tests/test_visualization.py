"""
Tests for report figures.

All tests fit REAL models on the synthetic corpus and write REAL PDF files
(no mocks or simulations).
"""

import matplotlib.pyplot as plt
import pandas as pd
import pytest

from bow_stylometry.classification import compare_strategies
from bow_stylometry.core import AnalysisConfig
from bow_stylometry.corpus import split_documents
from bow_stylometry.topics import run_topic_experiment
from bow_stylometry.visualization import (
    generate_regularization_path_figure,
    generate_strategy_comparison_figure,
    generate_topic_heatmap_figure,
    generate_word_cloud_figure,
)
from bow_stylometry.visualization.word_clouds import extract_author_weights
from conftest import make_corpus


@pytest.fixture(scope="module")
def strategy_results():
    train_df, test_df = split_documents(make_corpus(), train_size=0.8, seed=42, stratify=True)
    return compare_strategies(train_df, test_df, AnalysisConfig(Cs=8))


class TestRegularizationPath:
    """Test the regularization path figure."""

    def test_saves_pdf(self, strategy_results, tmp_path):
        _, results = strategy_results
        result = results['count']
        output_path = tmp_path / "path.pdf"

        fig = generate_regularization_path_figure(
            result['regularization_path'],
            best_C=result['best_C'],
            output_path=str(output_path),
            title='count'
        )

        assert output_path.exists()
        assert output_path.stat().st_size > 1000
        # Main axes plus the coefficient-count axis
        assert len(fig.axes) == 2
        assert fig.axes[0].get_title() == 'count'
        plt.close(fig)

    def test_without_output(self, strategy_results):
        _, results = strategy_results
        fig = generate_regularization_path_figure(results['tfidf']['regularization_path'])
        assert fig is not None
        plt.close(fig)


class TestStrategyComparison:
    """Test the strategy comparison bar chart."""

    def test_bars_per_strategy(self, strategy_results, tmp_path):
        summary, _ = strategy_results
        output_path = tmp_path / "comparison.pdf"

        fig = generate_strategy_comparison_figure(summary, output_path=str(output_path))

        assert output_path.exists()
        ax = fig.axes[0]
        # Two bars (CV and test) for each of the three strategies
        assert len(ax.patches) >= 6
        labels = [t.get_text() for t in ax.get_xticklabels()]
        assert labels == ['Counts', 'Hashed n-grams', 'TF-IDF']
        plt.close(fig)


class TestWordClouds:
    """Test word clouds of indicative terms."""

    def test_author_weights(self):
        features = pd.DataFrame({
            'term': ['darcy', 'paris', 'ball'],
            'coefficient': [-1.5, 2.0, -0.5],
            'label': [0, 1, 0],
        })
        assert extract_author_weights(features, 0) == {'darcy': 1.5, 'ball': 0.5}
        assert extract_author_weights(features, 1) == {'paris': 2.0}

    def test_saves_pdf(self, strategy_results, tmp_path):
        _, results = strategy_results
        result = results['count']
        features = result['classifier'].top_features(result['feature_names'])
        output_path = tmp_path / "wordcloud_dickens.pdf"

        fig = generate_word_cloud_figure(features, label=1, author='dickens', color_index=1, output_path=str(output_path))

        assert output_path.exists()
        assert fig.axes[0].get_title() == 'Dickens'
        assert len(fig.axes[0].texts) > 0
        plt.close(fig)

    def test_no_terms_for_label(self):
        features = pd.DataFrame({'term': ['darcy'], 'coefficient': [-1.0], 'label': [0]})
        with pytest.raises(ValueError):
            generate_word_cloud_figure(features, label=1)


class TestTopicHeatmap:
    """Test the author x topic heatmap."""

    def test_saves_pdf(self, corpus, tmp_path):
        config = AnalysisConfig(collocation_count_min=5, n_topics=4, lda_max_iter=5)
        result = run_topic_experiment(corpus, config)
        output_path = tmp_path / "topics.pdf"

        fig = generate_topic_heatmap_figure(result['author_topics'], output_path=str(output_path))

        assert output_path.exists()
        labels = [t.get_text() for t in fig.axes[0].get_yticklabels()]
        assert labels == ['Austen', 'Dickens']
        plt.close(fig)
