"""
Custom exception classes for the Discord log transport.

These exceptions are raised and caught inside the transport: resolution
failures at the handler resolver and delivery failures at the handler
boundary. They are reported through the package logger and never reach the
code that issued the logging call.
"""

from typing import Optional, Any, Dict, List


class TransportError(Exception):
    """
    Base exception class for all transport errors.

    Attributes:
        message (str): Human-readable error message
        error_code (str): Machine-readable error code for categorization
        context (Dict[str, Any]): Additional context information
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.context = context or {}

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


class ConfigurationError(TransportError):
    """
    Raised when no usable destination can be resolved or an option is invalid.

    The error records which settings were missing or malformed so that the
    logged diagnostic explains how to fix the setup.
    """

    def __init__(
        self,
        message: str,
        missing_keys: Optional[List[str]] = None,
        invalid_values: Optional[Dict[str, Any]] = None,
        env_file_path: Optional[str] = None
    ):
        context = {}
        if missing_keys:
            context['missing_keys'] = missing_keys
        if invalid_values:
            context['invalid_values'] = invalid_values
        if env_file_path:
            context['env_file_path'] = env_file_path

        super().__init__(message, "CONFIG_ERROR", context)
        self.missing_keys = missing_keys or []
        self.invalid_values = invalid_values or {}
        self.env_file_path = env_file_path

    def get_troubleshooting_message(self) -> str:
        """
        Get a detailed troubleshooting message for this configuration error.

        Returns:
            str: Formatted message with guidance on how to fix the issue
        """
        message = [f"Configuration Error: {self.message}"]

        if self.missing_keys:
            message.append("\nSet one of the following (options or environment):")
            for key in self.missing_keys:
                message.append(f"  - {key}")

        if self.invalid_values:
            message.append("\nInvalid values:")
            for key, value in self.invalid_values.items():
                message.append(f"  - {key}: {value}")

        if self.env_file_path:
            message.append(f"\nEnvironment file path: {self.env_file_path}")

        return "\n".join(message)


class DeliveryError(TransportError):
    """
    Raised when sending a formatted message to Discord fails.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        operation: Optional[str] = None,
        destination: Optional[str] = None
    ):
        context = {}
        if status_code:
            context['status_code'] = status_code
        if operation:
            context['operation'] = operation
        if destination:
            context['destination'] = destination

        super().__init__(message, "DELIVERY_ERROR", context)
        self.status_code = status_code
        self.operation = operation
        self.destination = destination
