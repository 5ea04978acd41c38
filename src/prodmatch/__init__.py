"""Match free-text product listings to a catalog of canonical products."""

__version__ = "0.1.0"
