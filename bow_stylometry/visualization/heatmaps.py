"""Heatmap of mean topic weight per author."""

import seaborn as sns
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from pathlib import Path


def generate_topic_heatmap_figure(
    author_topics,
    output_path=None,
    figsize=(12, 3),
    font='Helvetica'
):
    """
    Generate author x topic heatmap of mean document-topic weights.

    Args:
        author_topics: DataFrame indexed by author with one column per topic
            (``author_topics`` from run_topic_experiment())
        output_path: Path to save PDF (optional)
        figsize: Figure size
        font: Font family to use

    Returns:
        matplotlib figure object
    """
    plt.rcParams['font.family'] = font
    plt.rcParams['font.sans-serif'] = [font]

    heatmap_data = author_topics.copy()
    heatmap_data.index = [str(a).capitalize() for a in heatmap_data.index]

    fig, ax = plt.subplots(figsize=figsize)

    sns.heatmap(
        heatmap_data,
        annot=True,
        fmt=".2f",
        ax=ax,
        cbar=False,
        cmap="Blues",
        annot_kws={'fontsize': 8}
    )

    ax.set_xlabel("Topic", fontsize=12)
    ax.set_ylabel("")

    plt.xticks(fontsize=10, rotation=0)
    plt.yticks(fontsize=12, rotation=0)
    plt.tight_layout()

    if output_path:
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, format="pdf", bbox_inches="tight")

    return fig
