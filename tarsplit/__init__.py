"""Split TAR archives into smaller archives along entry boundaries."""

__version__ = "0.1.0"
