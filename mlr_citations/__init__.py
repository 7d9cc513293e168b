"""Citation and evidence linking for MLR review of promotional content."""

__version__ = "0.3.0"
