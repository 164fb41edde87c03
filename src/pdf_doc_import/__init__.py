"""Reconstruct structured documents from positioned PDF text and images."""

__version__ = "0.1.0"
