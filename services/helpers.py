import math
import polyline
from errors import InvalidFormat

EARTH_RADIUS_KM = 6371
KM_TO_MILES = 0.621371

def decode_polyline(encoded_polyline_str):
    if not encoded_polyline_str:
        return []
    return polyline.decode(encoded_polyline_str)

def haversine(lat1, lon1, lat2, lon2):
    """Great-circle distance in kilometers between two points"""
    lon1, lat1, lon2, lat2 = map(math.radians, [lon1, lat1, lon2, lat2])

    # Haversine formula
    dlon = lon2 - lon1
    dlat = lat2 - lat1
    a = math.sin(dlat / 2)**2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2)**2
    c = 2 * math.asin(math.sqrt(a))
    return c * EARTH_RADIUS_KM

def km_to_miles(km):
    return km * KM_TO_MILES

def distance_miles(coord1, coord2):
    return km_to_miles(haversine(coord1[0], coord1[1], coord2[0], coord2[1]))

def validate_coordinates(latitude, longitude):
    """Return a (lat, lng) pair, None when both are absent.

    Runs before any distance computation; haversine itself does not check
    its inputs.
    """
    if latitude is None and longitude is None:
        return None
    if latitude is None or longitude is None:
        raise InvalidFormat("Both latitude and longitude are required")
    if math.isnan(latitude) or math.isnan(longitude):
        raise InvalidFormat("Coordinates must be numbers")
    if not -90 <= latitude <= 90:
        raise InvalidFormat(f"Latitude {latitude} is out of range")
    if not -180 <= longitude <= 180:
        raise InvalidFormat(f"Longitude {longitude} is out of range")
    return latitude, longitude
