"""diffcov - coverage statistics for the lines a patch changed."""

__version__ = "0.1.0"
