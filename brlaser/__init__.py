"""Raster encoding of print jobs for Brother laser printers, and decoding back to PBM."""

__version__ = "6"

__all__ = ["block", "brdecode", "filter", "job", "line"]