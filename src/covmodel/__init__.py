"""covmodel: builds a hierarchical line/method coverage model from mprof reports."""

__version__ = "0.1.0"
