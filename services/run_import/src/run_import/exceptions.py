from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from run_import.models import RowParseError


class RunImportError(Exception):
    """Base class for all import failures."""


class AuthorizationError(RunImportError):
    pass


class ParseError(RunImportError, ValueError):
    """A single value could not be parsed."""


class BatchParseError(RunImportError):
    """One or more rows of the export failed validation.

    All row errors are collected so they can be reported together.
    """

    def __init__(self, errors: List["RowParseError"]):
        self.errors = errors
        super().__init__(f"{len(errors)} row(s) failed to parse")


class InvalidRowError(RunImportError):
    pass


class ExternalLookupError(RunImportError):
    pass


class ExternalLogError(RunImportError):
    pass
