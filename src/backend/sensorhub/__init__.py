"""SensorHub telemetry ingestion and retrieval API."""

__version__ = "0.1.0"
