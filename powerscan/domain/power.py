"""Domain DTO for power telemetry returned by a device."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class PowerReading:
    """Decoded ``/api/power`` payload for one device."""

    device_name: str = ""
    current_watts: float = 0.0
    voltage: float = 0.0
    amperage: float = 0.0
    timestamp: str = ""

    @classmethod
    def from_payload(cls, payload: Any) -> "PowerReading":
        """Build a reading from a decoded JSON document.

        Unknown keys are ignored and missing or ``null`` keys fall back to the
        field defaults.

        Raises:
            ValueError: If ``payload`` is not an object or a known key holds a
                value of the wrong JSON type.
        """
        if not isinstance(payload, Mapping):
            raise ValueError(
                f"expected JSON object, got {type(payload).__name__}"
            )

        def _as_text(key: str) -> str:
            value = payload.get(key)
            if value is None:
                return ""
            if not isinstance(value, str):
                raise ValueError(f"field {key!r} must be a string")
            return value

        def _as_float(key: str) -> float:
            value = payload.get(key)
            if value is None:
                return 0.0
            # bool is an int subclass but not a JSON number
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"field {key!r} must be a number")
            return float(value)

        return cls(
            device_name=_as_text("deviceName"),
            current_watts=_as_float("currentWatts"),
            voltage=_as_float("voltage"),
            amperage=_as_float("amperage"),
            timestamp=_as_text("timestamp"),
        )


__all__ = ["PowerReading"]
