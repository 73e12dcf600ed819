"""aicache - find, classify and clean AI coding-tool caches."""

__version__ = "0.1.0"
