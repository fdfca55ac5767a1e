"""Custom exceptions for Trade Mentor."""

from typing import Any


class TradeMentorError(Exception):
    """Base exception for all Trade Mentor errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(TradeMentorError):
    """Raised when there's a configuration problem."""

    pass


class LLMError(TradeMentorError):
    """Raised when the upstream model call fails."""

    def __init__(
        self,
        message: str,
        model: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.model = model
        self.status_code = status_code
        super().__init__(
            message,
            details={
                **(details or {}),
                "model": model,
                "status_code": status_code,
            },
        )


class StorageError(TradeMentorError):
    """Raised when journal persistence fails."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.operation = operation
        self.path = path
        super().__init__(
            message,
            details={
                **(details or {}),
                "operation": operation,
                "path": path,
            },
        )


class TradeNotFoundError(TradeMentorError):
    """Raised when a trade id is not in the journal."""

    def __init__(
        self,
        trade_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.trade_id = trade_id
        super().__init__(
            f"Trade not found: {trade_id}",
            details={**(details or {}), "trade_id": trade_id},
        )
