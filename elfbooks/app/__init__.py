"""Application composition layer.

Controllers in this package wire viewmodels, adapters, and use cases into
runnable workflows without placing business logic in the entry point.
"""
