from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

# Concentration metrics in display order. Keys are Reading attribute names,
# values are the field names used on the wire.
METRIC_FIELDS: dict[str, str] = {
    "co2_ppm": "co2Ppm",
    "nh3_ppm": "nh3Ppm",
    "benzene_ppm": "benzenePpm",
    "lpg_ppm": "lpgPpm",
    "co_ppm": "coPpm",
}

METRIC_LABELS: dict[str, str] = {
    "co2_ppm": "CO2",
    "nh3_ppm": "NH3",
    "benzene_ppm": "Benzene",
    "lpg_ppm": "LPG",
    "co_ppm": "CO",
}

METRIC_COLORS: dict[str, str] = {
    "co2_ppm": "rgba(255, 99, 132, 1)",
    "nh3_ppm": "rgba(54, 162, 235, 1)",
    "benzene_ppm": "rgba(255, 206, 86, 1)",
    "lpg_ppm": "rgba(75, 192, 192, 1)",
    "co_ppm": "rgba(153, 102, 255, 1)",
}

# Exceedance boundaries (ppm). A value strictly above its boundary is critical.
THRESHOLDS: Mapping[str, float] = MappingProxyType(
    {
        "co2_ppm": 1000.0,
        "nh3_ppm": 50.0,
        "benzene_ppm": 0.1,
        "lpg_ppm": 1000.0,
        "co_ppm": 9.0,
    }
)

MINUTES_PER_DAY_MAX = 1439
TIME_RANGE_STEP = 15

# Display colour and description per air quality status.
STATUS_DETAILS: dict[str, tuple[str, str]] = {
    "Good": ("green", "Air quality is safe and harmless to health."),
    "Moderate": ("orange", "Air quality is acceptable; sensitive people may be slightly affected."),
    "Poor": ("red", "Air quality is poor and may be hazardous to health."),
    "Unknown": ("gray", "No data available."),
}
