"""
Base Service Class.

Standardises the logger attribute for service classes.  Services add
their own repository dependencies via ``__init__``.
"""

from __future__ import annotations

from edunex.logger import StructuredLogger


class BaseService:
    """Base class for all service classes. Provides a logger."""

    def __init__(self, logger: StructuredLogger) -> None:
        self._logger: StructuredLogger = logger
