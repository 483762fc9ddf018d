"""Runtime services shared across widebuf (telemetry, configuration)."""

from . import telemetry

__all__ = ["telemetry"]
