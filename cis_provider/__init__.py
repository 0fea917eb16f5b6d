"""Declarative resource provider for Internet Services rate limit rules."""

__version__ = "0.1.0"
