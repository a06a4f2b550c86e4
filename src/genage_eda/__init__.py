"""Exploratory analysis of genes associated with human aging (GenAge)."""

__version__ = "0.1.0"
