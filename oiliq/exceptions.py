"""
Domain Exceptions

Validation failures are raised to the immediate caller and never swallowed.
The API layer maps them onto HTTP status codes (see oiliq.api.main).
"""


class OilQualityError(Exception):
    """Base class for all FoodOil IQ domain errors."""
    pass


class InvalidLimit(OilQualityError, ValueError):
    """A regulatory limit is zero, negative or not a finite number."""

    def __init__(self, limit: float, parameter: str = "limit"):
        self.limit = limit
        self.parameter = parameter
        super().__init__(f"{parameter} must be a positive finite number, got {limit!r}")


class InvalidReading(OilQualityError, ValueError):
    """A measured value is NaN, infinite or negative."""

    def __init__(self, parameter: str, value: float):
        self.parameter = parameter
        self.value = value
        super().__init__(f"Invalid reading for {parameter}: {value!r}")


class MissingField(OilQualityError, ValueError):
    """A required report field is absent or blank."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Required report field '{field}' is missing")


class RecordNotFound(OilQualityError, LookupError):
    """A station, batch, test record or alert does not exist."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} '{record_id}' not found")


class PredictionError(OilQualityError):
    """The remote prediction service failed (timeout, network, bad payload)."""
    pass
