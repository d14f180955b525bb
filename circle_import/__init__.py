"""Shopping-list import normalization and ordering for circle events.

Imports tabular data (clipboard paste, CSV file, published spreadsheet export),
normalizes it into shopping items and keeps them in a stable, locale-aware order.
"""

__version__ = "0.1.0"
