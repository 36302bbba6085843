"""Exception hierarchy for the Trainable Base Template engine.

Low confidence is never an error: a query the engine cannot answer comes
back as a normal result with ``should_use_external_api`` set.
"""


class BaseTemplateError(Exception):
    """Root of all engine errors."""


class ValidationError(BaseTemplateError, ValueError):
    """Input rejected before any state was touched."""


class InvalidInputError(ValidationError):
    """Training content is structurally invalid or of an unsupported type."""


class InvalidDataError(ValidationError):
    """A knowledge base snapshot is missing required fields or malformed."""


class PersistenceError(BaseTemplateError):
    """A snapshot backend failed to load, save, or clear.

    The engine logs and swallows these and keeps running in memory.
    """
