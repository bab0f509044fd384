"""Data model for a satellite grid resolution estimate."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Ground distance between adjacent satellite samples at one latitude.

    Attributes:
        res_ns_km: North-south distance between samples (km).
        res_we_km: West-east distance between samples (km).
        lat: Latitude the estimate applies to (degrees).
        d_lat: North-south sampling interval (degrees).
        d_lon: East-west sampling interval (degrees).
    """

    res_ns_km: float
    res_we_km: float
    lat: float = 0.0
    d_lat: float = 0.0
    d_lon: float = 0.0

    def as_dict(self) -> dict[str, float]:
        """Labelled pair keyed ``res.NS`` / ``res.WE`` (km)."""
        return {"res.NS": self.res_ns_km, "res.WE": self.res_we_km}

    def to_dict(self) -> dict[str, float]:
        return {
            "lat": self.lat,
            "d_lat": self.d_lat,
            "d_lon": self.d_lon,
            "res_ns_km": self.res_ns_km,
            "res_we_km": self.res_we_km,
        }
