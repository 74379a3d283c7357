"""EduNex college administration desktop client."""

__version__ = "0.3.0"
