"""TagSearch - vector search front-end for tagged media collections."""

__version__ = "0.1.0"
