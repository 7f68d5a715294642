"""MedExplain: plain-language pharmacogenomics lookups."""

__version__ = "0.1.0"
