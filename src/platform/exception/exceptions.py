class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DomainError(CustomBaseError):
    pass


class ConfigurationError(CustomBaseError):
    pass


class MalformedPayloadError(CustomBaseError):
    """Raw transport payload could not be decoded into a mapping"""
