"""Runtime services (telemetry) shared by every engine layer."""

from . import telemetry

__all__ = ["telemetry"]
