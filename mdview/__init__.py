"""Multidimensional views, a row-major layout mapping, owning arrays and sample kernels over flat sequences."""

__version__ = "0.1.0"