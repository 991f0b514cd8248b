"""Approximate search of TCR junction sequences over a trie, by edit counts or a substitution matrix."""

__version__ = "0.1.0"