"""Per-ticket conference registration checkout for Django."""

__version__ = "0.1.0"
