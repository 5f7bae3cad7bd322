"""Custom exceptions for docpress."""

from typing import Optional


class DocPressError(Exception):
    """Base exception for docpress errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ValidationError(DocPressError):
    """Exception raised when a mandatory domain field is missing."""

    def __init__(self, message: str, details: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message, details)
        self.field = field


class LayoutError(DocPressError):
    """Exception describing a block that cannot be placed even on an empty page.

    The layout engine never raises it to callers; it is logged and the
    block is clipped to the page it lands on.
    """

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        block_kind: Optional[str] = None,
        required_height: float = 0.0,
        available_height: float = 0.0,
    ):
        super().__init__(message, details)
        self.block_kind = block_kind
        self.required_height = required_height
        self.available_height = available_height


class AssetError(DocPressError):
    """Exception raised when an embedded image or logo cannot be read."""

    pass


class AssemblyError(DocPressError):
    """Exception raised when finished pages cannot be serialized."""

    pass
