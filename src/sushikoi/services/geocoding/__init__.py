"""Address geocoding."""

from .nominatim import GeocodeResult, NominatimClient, pick_best_match

__all__ = ["GeocodeResult", "NominatimClient", "pick_best_match"]
