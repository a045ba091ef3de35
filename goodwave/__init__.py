"""HTTP back end and data-loading commands for a MongoDB catalogue of surf spots."""

__version__ = "0.1.0"