"""folio: Markdown content record store for a portfolio blog."""

__version__ = "0.1.0"
