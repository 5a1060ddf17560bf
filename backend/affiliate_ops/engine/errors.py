class IncentiveInputError(ValueError):
    """Raised when the engine is handed input it cannot compute with (missing or ill-typed fields)."""
