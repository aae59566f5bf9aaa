from __future__ import annotations


class PermanentRecordError(Exception):
    """Base class for errors raised by permanent_record."""


class ConfigurationError(PermanentRecordError):
    """A model's data source cannot be used."""


class SourceNotFoundError(ConfigurationError, LookupError):
    """No registered source matches the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No record source registered under {name!r}")
        self.name = name


class EmptySourceError(ConfigurationError):
    """Attributes cannot be discovered from an empty source."""


class UnknownAttributeError(PermanentRecordError, LookupError):
    """Raised when querying by an attribute the model does not have."""

    def __init__(self, model: str, attribute: str) -> None:
        super().__init__(f"{model} has no attribute {attribute!r}")
        self.model = model
        self.attribute = attribute
