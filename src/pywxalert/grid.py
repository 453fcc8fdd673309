"""Latitude/longitude to KMA forecast grid projection.

The KMA forecast mesh is a Lambert Conformal Conic projection with two
standard parallels. Cells are 5 km apart and the projection origin
(38°N, 126°E) sits at grid cell (43, 136).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

RE = 6371.00877  # Earth radius (km)
GRID = 5.0  # Grid spacing (km)
SLAT1 = 30.0  # Standard parallel 1 (degrees)
SLAT2 = 60.0  # Standard parallel 2 (degrees)
OLON = 126.0  # Origin longitude (degrees)
OLAT = 38.0  # Origin latitude (degrees)
XO = 43  # Origin X (grid cells)
YO = 136  # Origin Y (grid cells)

DEGRAD = math.pi / 180.0


@dataclass(frozen=True, slots=True)
class GridCoordinate:
    """A cell in the forecast mesh.

    Both indices are NaN when the input coordinate was NaN.
    """

    nx: int | float
    ny: int | float

    @property
    def is_valid(self) -> bool:
        return math.isfinite(self.nx) and math.isfinite(self.ny)


def _projection_constants() -> tuple[float, float, float, float]:
    re = RE / GRID
    slat1 = SLAT1 * DEGRAD
    slat2 = SLAT2 * DEGRAD
    olat = OLAT * DEGRAD

    sn = math.tan(math.pi * 0.25 + slat2 * 0.5) / math.tan(math.pi * 0.25 + slat1 * 0.5)
    sn = math.log(math.cos(slat1) / math.cos(slat2)) / math.log(sn)
    sf = math.tan(math.pi * 0.25 + slat1 * 0.5)
    sf = math.pow(sf, sn) * math.cos(slat1) / sn
    ro = math.tan(math.pi * 0.25 + olat * 0.5)
    ro = re * sf / math.pow(ro, sn)
    return re, sn, sf, ro


_RE, _SN, _SF, _RO = _projection_constants()


def _round_half_up(value: float) -> int | float:
    if not math.isfinite(value):
        return value
    return math.floor(value + 0.5)


def to_grid(latitude: float, longitude: float) -> GridCoordinate:
    """Project a WGS84 coordinate onto the forecast grid.

    Rounding is ``floor(x + 0.5)`` (round half up), matching the reference
    grid tables. Inputs are not validated: a NaN coordinate yields NaN
    indices, which callers must treat as invalid (see ``is_valid``).
    """
    ra = math.tan(math.pi * 0.25 + latitude * DEGRAD * 0.5)
    ra = _RE * _SF / math.pow(ra, _SN)

    theta = longitude * DEGRAD - OLON * DEGRAD
    if theta > math.pi:
        theta -= 2.0 * math.pi
    if theta <= -math.pi:
        theta += 2.0 * math.pi
    theta *= _SN

    return GridCoordinate(
        nx=_round_half_up(ra * math.sin(theta) + XO),
        ny=_round_half_up(_RO - ra * math.cos(theta) + YO),
    )
