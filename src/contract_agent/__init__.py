"""Contract table agent: natural-language operations over a contract store."""

__version__ = "0.1.0"
