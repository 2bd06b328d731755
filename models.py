"""Reading model and its wire (JSON) representation."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from constants import METRIC_FIELDS
from utils.time import to_local_naive

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reading:
    """A single air-quality sample as delivered by the API."""

    id: Any
    timestamp: datetime
    temperature: float
    humidity: float
    co2_ppm: float
    nh3_ppm: float
    benzene_ppm: float
    lpg_ppm: float
    co_ppm: float

    def metric(self, name: str) -> float:
        return getattr(self, name)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], tz: Optional[str] = None) -> "Reading":
        """
        Build a Reading from one API record. Metric values that are missing
        or not numeric become NaN; an unparseable timestamp raises ValueError.
        """
        values = {name: _coerce_float(payload.get(wire)) for name, wire in METRIC_FIELDS.items()}
        return cls(
            id=payload.get("id"),
            timestamp=to_local_naive(payload.get("timestamp"), tz),
            temperature=_coerce_float(payload.get("temperature")),
            humidity=_coerce_float(payload.get("humidity")),
            **values,
        )

    def to_payload(self) -> Dict[str, Any]:
        """Serialize using the camelCase submission schema."""
        payload: Dict[str, Any] = {
            "timestamp": self.timestamp.isoformat(timespec="seconds"),
            "temperature": self.temperature,
            "humidity": self.humidity,
        }
        for name, wire in METRIC_FIELDS.items():
            payload[wire] = self.metric(name)
        return payload


def _coerce_float(value: Any) -> float:
    if value is None:
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.debug("Non-numeric metric value", extra={"reason": repr(value)})
        return math.nan
