"""Multi-market fund portfolio monitor: quote acquisition and aggregation."""

__version__ = "0.1.0"
