"""Record-level invariant checks run before flushing to the database."""


class RecordValidationError(ValueError):
    """Raised when a record breaks a model invariant.

    Collects every failed rule so callers can log the full reason before
    skipping the record.
    """

    def __init__(self, model: str, errors: list[str]):
        self.model = model
        self.errors = errors
        super().__init__(f"{model} invalid: {', '.join(errors)}")
