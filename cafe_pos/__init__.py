"""
Café POS order core.

Order lifecycle and consistency engine: orders, their line items, totals,
payment and per-item fulfillment status.
"""

__version__ = "1.0.0"
