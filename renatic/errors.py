"""
Error hierarchy for Renatic.

Every failure raised by the generator is a RenaticError. Errors are re-raised
with more context as they travel up the pipeline: the new error keeps the
class of the original and the original stays reachable as ``__cause__``.
"""


class RenaticError(Exception):
    """Base error for all Renatic operations."""

    def __init__(self, message, stage=None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def __str__(self):
        if self.stage:
            return f"[{self.stage}] {self.message}"
        return self.message

    def wrap(self, message, stage=None):
        """Return a new error of the same class describing an outer step.

        Use as ``raise err.wrap("...") from err``.
        """
        return self.__class__(message, stage=stage or self.stage)


class IoError(RenaticError):
    """A file or directory could not be read or written."""


class ConfigError(RenaticError):
    """Invalid or missing configuration."""


class ContentFormatError(RenaticError):
    """A content file does not have the header/body structure."""


class MetadataError(ContentFormatError):
    """The metadata header of a content file is malformed."""


class MissingFieldError(MetadataError):
    """A required metadata field is absent."""


class DateFormatError(MetadataError):
    """A date field is not in YYYY-MM-DD form."""


class FieldTypeError(MetadataError, TypeError):
    """A metadata field has the wrong type."""


class TemplateError(RenaticError):
    """A template is unknown or failed to render."""


class PathError(RenaticError, ValueError):
    """A path escapes its expected root or collides with another output."""


def error_chain(error):
    """Return the messages of an exception and all of its causes, outermost first."""
    messages = []
    seen = set()
    current = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        messages.append(str(current))
        current = current.__cause__
    return messages
