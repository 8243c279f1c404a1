"""Topic modeling over collocation-aware document-term matrices."""

from .lda import TopicModel
from .experiment import run_topic_experiment

__all__ = [
    'TopicModel',
    'run_topic_experiment',
]
