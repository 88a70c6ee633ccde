"""Multi-source job aggregation engine for Belgian job boards."""

__version__ = "0.4.0"
