__version__ = "0.4.0"  # pragma: no cover
