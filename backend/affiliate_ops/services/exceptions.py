class NotFoundError(ValueError):
    """A referenced row does not exist."""


class SalesImportError(ValueError):
    """An uploaded sales file cannot be ingested."""
