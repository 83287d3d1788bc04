"""
Exception hierarchy for the printpos package.

All errors raised by the command encoder, the transcoder, the template
loader and the transports derive from PrinterError, so a print job can catch
one type and keep going.

Hierarchy:
    PrinterError (base)
    ├── InvalidArgument      bad alignment/font/size/language token, bad range
    ├── EncodingError        character not representable in the code page
    ├── EmptyPayload         nothing to send after replacement and transcoding
    ├── TransportError       write/read on the byte sink failed (recorded, not raised)
    ├── NotStartedError      content sent before ThermalPrinter.begin()
    ├── UnsupportedNode      template node kind the encoder cannot print
    └── TemplateError        malformed template record

Example:
    >>> from printpos.errors import PrinterError
    >>> try:
    ...     printer.set_align("diagonal")
    ... except PrinterError as e:
    ...     logger.warning("Skipped: %s", e)
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__: list[str] = [
    "PrinterError",
    "InvalidArgument",
    "EncodingError",
    "EmptyPayload",
    "TransportError",
    "NotStartedError",
    "UnsupportedNode",
    "TemplateError",
]


# ==============================================================================
# BASE EXCEPTION
# ==============================================================================


class PrinterError(Exception):
    """
    Base exception for every printpos error.

    Attributes:
        message: Human readable description
        operation: Encoder operation that failed (optional)
        context: Extra values for debugging (optional)

    Example:
        >>> raise PrinterError("Operation failed", operation="barcode", context={"code": "X"})
    """

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.context = context or {}

    def __str__(self) -> str:
        """
        Render the message with operation and context.

        Example:
            >>> str(InvalidArgument("Invalid alignment", operation="set_align"))
            'InvalidArgument: Invalid alignment [operation=set_align]'
        """
        parts = [self.__class__.__name__, ": ", self.message]

        if self.operation:
            parts.append(f" [operation={self.operation}]")

        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f" ({ctx_str})")

        return "".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"operation={self.operation!r}, "
            f"context={self.context!r})"
        )


# ==============================================================================
# INPUT ERRORS
# ==============================================================================


class InvalidArgument(PrinterError, ValueError):
    """
    A token or number outside the accepted set.

    Raised before any byte is written; printer state is left unchanged.

    Example:
        >>> raise InvalidArgument("Invalid alignment: 'up'", operation="set_align")
    """


class EncodingError(PrinterError):
    """
    Text contains a character the selected code page cannot represent.

    Raised before any byte of the text is sent.
    """

    def __init__(
        self,
        message: str,
        *,
        code_page: Optional[str] = None,
        character: Optional[str] = None,
        operation: Optional[str] = None,
    ) -> None:
        context: Dict[str, Any] = {}
        if code_page is not None:
            context["code_page"] = code_page
        if character is not None:
            context["character"] = repr(character)
        super().__init__(message, operation=operation, context=context)
        self.code_page = code_page
        self.character = character


class EmptyPayload(PrinterError):
    """Nothing left to send. A no-op failure, not a crash."""


class UnsupportedNode(PrinterError):
    """Template node kind that this encoder does not print (image, QR code)."""


class TemplateError(PrinterError, ValueError):
    """Template record that cannot be turned into print nodes."""


# ==============================================================================
# RUNTIME ERRORS
# ==============================================================================


class TransportError(PrinterError):
    """
    Write or read on the underlying byte sink failed.

    The encoder records the first and latest failure and keeps going;
    see ThermalPrinter.transport_error.
    """

    def __init__(
        self,
        message: str,
        *,
        cause: Optional[BaseException] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, operation=operation, context=context)
        self.cause = cause


class NotStartedError(PrinterError):
    """
    Content was sent before begin().

    The printer needs the wake sequence and heating parameters first.
    """
