"""Classified ShopSync decode failures"""

from typing import Optional

from src.platform.exception.exceptions import DomainError
from src.service.shared_kernel.domain.enum.error_kind import ErrorKind


class DocumentRejectedError(DomainError):
    """A whole document was refused before model construction"""

    kind: ErrorKind = ErrorKind.WRONG_TYPE

    def __init__(self, message: str, *, field_path: Optional[str] = None) -> None:
        self.field_path = field_path
        super().__init__(message)


class WrongTypeError(DocumentRejectedError):
    kind = ErrorKind.WRONG_TYPE


class MissingRequiredFieldError(DocumentRejectedError):
    kind = ErrorKind.MISSING_REQUIRED_FIELD

    def __init__(self, field_path: str) -> None:
        super().__init__(f'Missing required field: {field_path}', field_path=field_path)


class MalformedListingError(DomainError):
    """One listing broke a rule; decoders drop it and keep the rest of the snapshot"""

    kind = ErrorKind.MALFORMED_LISTING
