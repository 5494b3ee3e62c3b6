from enum import StrEnum


class ErrorKind(StrEnum):
    # Whole document rejected
    WRONG_TYPE = 'WrongType'
    MISSING_REQUIRED_FIELD = 'MissingRequiredField'

    # Non-fatal, reported as warnings alongside an accepted snapshot
    MALFORMED_LISTING = 'MalformedListing'
    MALFORMED_FIELD = 'MalformedField'
