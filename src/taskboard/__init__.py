"""taskboard: a small task manager with one shared search/filter evaluator."""

__version__ = "0.1.0"
