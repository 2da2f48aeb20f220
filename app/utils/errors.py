# app/utils/errors.py
from typing import Dict, List


class ModelValidationError(ValueError):
    """Raised by the data layer when a record violates its field constraints.

    Carries every failing field, not just the first one, so handlers can
    report them all at once.
    """

    def __init__(self, errors: List[Dict[str, str]]):
        self.errors = errors
        fields = ", ".join(error["field"] for error in errors)
        super().__init__(f"Validation failed for: {fields}")

    @classmethod
    def single(cls, field: str, message: str) -> "ModelValidationError":
        return cls([{"field": field, "message": message}])
