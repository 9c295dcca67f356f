"""Distance and travel-time estimation."""

from .matrix import GeoDistanceMatrix, haversine_km, EARTH_RADIUS_KM

__all__ = ["GeoDistanceMatrix", "haversine_km", "EARTH_RADIUS_KM"]
