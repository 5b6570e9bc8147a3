"""
Water service satisfaction survey.

A five-step survey wizard whose completed responses are posted as one JSON
row to a spreadsheet-backed collector.
"""

__version__ = "0.1.0"
