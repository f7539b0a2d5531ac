"""Router module for request classification."""

from .classifier import RequestClassifier, classify_request

__all__ = [
    "RequestClassifier",
    "classify_request",
]
