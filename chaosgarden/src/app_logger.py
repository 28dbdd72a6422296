"""Operational logging with an operation tag and structured metadata."""

from __future__ import annotations

import logging


class ApplicationLogger:
    """Thin wrapper over a stdlib logger: `info("run_tick", "done", tick=4)`.

    Metadata is rendered into the message and also attached to the record
    as `operation` / `metadata` attributes for handlers that want them.
    """

    def __init__(self, name: str = "chaosgarden", logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger(name)

    def debug(self, operation: str, message: str, **metadata) -> None:
        self._log(logging.DEBUG, operation, message, metadata)

    def info(self, operation: str, message: str, **metadata) -> None:
        self._log(logging.INFO, operation, message, metadata)

    def warn(self, operation: str, message: str, **metadata) -> None:
        self._log(logging.WARNING, operation, message, metadata)

    def error(self, operation: str, message: str, **metadata) -> None:
        self._log(logging.ERROR, operation, message, metadata)

    def fatal(self, operation: str, message: str, **metadata) -> None:
        self._log(logging.CRITICAL, operation, message, metadata)

    def _log(self, level: int, operation: str, message: str, metadata: dict) -> None:
        if not self._logger.isEnabledFor(level):
            return
        details = " ".join(f"{key}={value}" for key, value in metadata.items())
        self._logger.log(
            level,
            "[%s] %s%s",
            operation,
            message,
            f" ({details})" if details else "",
            extra={"operation": operation, "metadata": metadata},
        )
