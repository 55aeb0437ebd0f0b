"""
Project Mass import package.

This package rebuilds a structured training history from the
hand-logged Project Mass spreadsheet: one sheet per training day,
parsed into dated sets, grouped into segments and matched to the
known program instances.
"""

__version__ = "0.1.0"
