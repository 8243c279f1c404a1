"""Bag-of-words stylometry: authorship classification, collocations and topics."""

__version__ = "0.1.0"
