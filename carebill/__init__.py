"""CareBill - patient admission and billing record keeper."""

__version__ = "1.0.0"
