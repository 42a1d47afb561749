"""opsfile - small, stateless filesystem helper functions."""

__version__ = "0.1.0"
