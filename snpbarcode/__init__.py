"""Chromosomes, genotype data, post-processing and data-preparation tools for SNP barcode searches."""

__version__ = "0.1.0"