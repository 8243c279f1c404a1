"""Grouped bar chart of cross-validated and test AUC per vectorization strategy."""

import pandas as pd
import seaborn as sns
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from pathlib import Path

from bow_stylometry.core.constants import VECTORIZER_STRATEGIES


STRATEGY_LABELS = {
    'count': 'Counts',
    'hash': 'Hashed n-grams',
    'tfidf': 'TF-IDF',
}


def generate_strategy_comparison_figure(
    summary_df: pd.DataFrame,
    output_path: str = None,
    figsize: tuple = (8, 5),
    font: str = 'Helvetica'
):
    """
    Generate grouped bar chart comparing AUC across vectorization strategies.

    Args:
        summary_df: Summary from compare_strategies() (strategy, cv_auc, test_auc)
        output_path: Path to save PDF (optional)
        figsize: Figure size
        font: Font family to use

    Returns:
        matplotlib figure object

    Examples:
        >>> summary, results = compare_strategies(train_df, test_df)
        >>> fig = generate_strategy_comparison_figure(summary)
    """
    plt.rcParams['font.family'] = font
    plt.rcParams['font.sans-serif'] = [font]

    # Long format for seaborn
    plot_df = summary_df.melt(
        id_vars='strategy',
        value_vars=['cv_auc', 'test_auc'],
        var_name='evaluation',
        value_name='auc'
    )
    plot_df['evaluation'] = plot_df['evaluation'].map({'cv_auc': 'Cross-validated', 'test_auc': 'Held-out test'})
    plot_df['strategy'] = plot_df['strategy'].map(lambda s: STRATEGY_LABELS.get(s, s))

    order = [STRATEGY_LABELS[s] for s in VECTORIZER_STRATEGIES if STRATEGY_LABELS[s] in set(plot_df['strategy'])]

    fig, ax = plt.subplots(figsize=figsize)

    sns.barplot(
        data=plot_df,
        x='strategy',
        y='auc',
        hue='evaluation',
        order=order,
        hue_order=['Cross-validated', 'Held-out test'],
        ax=ax,
        palette='Set2'
    )

    for container in ax.containers:
        ax.bar_label(container, fmt='%.3f', fontsize=9)

    ax.set_xlabel('')
    ax.set_ylabel('AUC', fontsize=12)
    ax.set_ylim(0, 1.05)
    ax.legend(title='', frameon=False, loc='lower right')
    sns.despine(ax=ax, top=True, right=True)

    plt.tight_layout()

    if output_path:
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, format='pdf', bbox_inches='tight')

    return fig
