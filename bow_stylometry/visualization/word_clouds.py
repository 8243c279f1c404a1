"""Word clouds of the terms a fitted classifier relies on, using the wordcloud library."""

from pathlib import Path
from typing import Dict, Optional

import pandas as pd
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
import matplotlib.colors as mcolors
import seaborn as sns
from wordcloud import WordCloud


def extract_author_weights(
    features_df: pd.DataFrame,
    label
) -> Dict[str, float]:
    """
    Coefficient magnitudes of the terms pointing to one label.

    Args:
        features_df: Output of AuthorshipClassifier.top_features()
        label: Class label whose terms are kept

    Returns:
        Dictionary mapping term -> |coefficient|
    """
    rows = features_df[features_df['label'] == label]
    return {term: abs(float(coef)) for term, coef in zip(rows['term'], rows['coefficient'])}


def generate_word_cloud_figure(
    features_df: pd.DataFrame,
    label,
    author: Optional[str] = None,
    color_index: int = 0,
    output_path: Optional[str] = None,
    figsize: tuple = (12, 8),
    font: str = 'Helvetica',
    max_words: int = 100
):
    """
    Generate a word cloud of one author's most indicative terms.

    Args:
        features_df: Output of AuthorshipClassifier.top_features()
        label: Class label of the author
        author: Author name for the figure title (optional)
        color_index: Index into the tab10 palette for the word color
        output_path: Path to save PDF (optional)
        figsize: Figure size
        font: Font family
        max_words: Maximum words to display

    Returns:
        matplotlib figure object

    Raises:
        ValueError: If no non-zero coefficient points to the label

    Examples:
        >>> features = clf.top_features(feature_names)
        >>> fig = generate_word_cloud_figure(features, label=1, author='dickens')
    """
    plt.rcParams['font.family'] = font
    plt.rcParams['font.sans-serif'] = [font]

    weights = extract_author_weights(features_df, label)
    if not weights:
        raise ValueError(f"No non-zero coefficients for label {label}")

    color = mcolors.rgb2hex(sns.color_palette("tab10")[color_index % 10])

    def color_func(word, font_size, position, orientation, random_state=None, **kwargs):
        return color

    wc = WordCloud(
        width=1200,
        height=800,
        background_color='white',
        max_words=max_words,
        relative_scaling=0.5,
        color_func=color_func,
        prefer_horizontal=0.7
    )
    wc.generate_from_frequencies(weights)

    # Render the layout as vector text rather than a bitmap
    fig, ax = plt.subplots(figsize=figsize)
    ax.set_xlim(0, wc.width)
    ax.set_ylim(0, wc.height)
    ax.axis('off')

    for (word, count), font_size, (x, y), orientation, wc_color in wc.layout_:
        ax.text(
            x, wc.height - y,  # Flip y-axis to match image coordinates
            word,
            fontsize=font_size * 0.5,
            color=color,
            rotation=orientation,
            ha='center',
            va='center',
            family=font
        )

    if author:
        ax.set_title(author.capitalize(), fontsize=16)

    plt.tight_layout(pad=0)

    if output_path:
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, format='pdf', bbox_inches='tight')

    return fig
