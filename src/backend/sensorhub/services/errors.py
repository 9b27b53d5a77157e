"""Errors raised by the telemetry services.

Each error is scoped to a single operation and reported to the immediate
caller; nothing here is retried internally.
"""


class TelemetryError(Exception):
    """Base class for telemetry service errors."""
    pass


class ValidationError(TelemetryError):
    """Input is missing, of the wrong type, or out of range (including start > end)."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class ReferentialError(TelemetryError):
    """A reading references a device that does not exist."""

    def __init__(self, device_id):
        super().__init__(f"Device {device_id} does not exist; register it before submitting readings")
        self.device_id = device_id


class NotFoundError(TelemetryError):
    """A singular lookup matched nothing."""
    pass
