"""friendgraph — social network graph engine and CLI."""

__version__ = "0.1.0"
