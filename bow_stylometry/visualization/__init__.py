"""Report figures for bow-stylometry."""

from .regularization_path import generate_regularization_path_figure
from .classification_accuracy import generate_strategy_comparison_figure
from .word_clouds import generate_word_cloud_figure
from .heatmaps import generate_topic_heatmap_figure

__all__ = [
    'generate_regularization_path_figure',
    'generate_strategy_comparison_figure',
    'generate_word_cloud_figure',
    'generate_topic_heatmap_figure',
]
