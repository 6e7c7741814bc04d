"""gitstory: year-in-review reports for GitHub accounts."""

__version__ = "0.1.0"
