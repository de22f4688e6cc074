"""zapstore-cli: Command-line interface for the zapstore package manager."""

__version__ = "0.1.0"
