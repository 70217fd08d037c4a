"""tablefix - clean or profile CSV tables."""

__version__ = "0.1.0"
