"""ganalyzer - contributor statistics across many git repositories."""

__version__ = "0.1.0"
