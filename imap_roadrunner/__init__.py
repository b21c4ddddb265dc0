"""IMAP Roadrunner - IMAP fetch/search benchmarking tool."""
__all__ = ["__version__"]
__version__ = "1.0.0"
