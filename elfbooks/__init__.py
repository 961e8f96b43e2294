"""Elf Book Catalog: inventory plus a cancellable book detail pipeline."""

__version__ = "0.1.0"
