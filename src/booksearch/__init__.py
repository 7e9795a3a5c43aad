"""booksearch: headless in-page search for statically generated books."""

__version__ = "0.1.0"
