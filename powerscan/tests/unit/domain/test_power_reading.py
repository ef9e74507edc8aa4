from __future__ import annotations

import pytest

from powerscan.domain.power import PowerReading


def test_from_payload_reads_known_fields() -> None:
    reading = PowerReading.from_payload(
        {
            "deviceName": "Lamp",
            "currentWatts": 12.5,
            "voltage": 230,
            "amperage": 0.05,
            "timestamp": "2024-02-02T15:04:05Z",
        }
    )
    assert reading == PowerReading(
        device_name="Lamp",
        current_watts=12.5,
        voltage=230.0,
        amperage=0.05,
        timestamp="2024-02-02T15:04:05Z",
    )


def test_from_payload_defaults_missing_and_null_fields() -> None:
    reading = PowerReading.from_payload({"currentWatts": None, "extra": [1, 2]})
    assert reading == PowerReading()


@pytest.mark.parametrize(
    "payload",
    [
        [1, 2, 3],
        "text",
        {"currentWatts": "12"},
        {"currentWatts": True},
        {"timestamp": 5},
    ],
)
def test_from_payload_rejects_wrong_shapes(payload) -> None:
    with pytest.raises(ValueError):
        PowerReading.from_payload(payload)
