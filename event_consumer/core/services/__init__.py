"""
Core services implementing the consumer's event processing.
"""

from .classifier import MessageClassifier
from .consumer import ConsumerService
from .shutdown import CloseOnce

__all__ = [
    "ConsumerService",
    "MessageClassifier",
    "CloseOnce",
]
