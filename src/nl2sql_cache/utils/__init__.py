"""Utility modules for the semantic cache."""

from .similarity import cosine_similarity

__all__ = ["cosine_similarity"]
