from google.maps import routing_v2
from google.type import latlng_pb2

import logging
logger = logging.getLogger(__name__)

ROUTE_FIELD_MASK = "routes.distanceMeters,routes.duration,routes.polyline.encodedPolyline"

def _waypoint(coord):
    return routing_v2.Waypoint(
        location=routing_v2.Location(lat_lng=latlng_pb2.LatLng(latitude=coord[0], longitude=coord[1]))
    )

async def get_driving_route(client, origin_coord, destination_coord):
    """First driving route between two points, None when the API finds none.

    Distances from here are only shown to users; ride matching uses
    straight-line distance.
    """
    request = routing_v2.ComputeRoutesRequest(
        origin=_waypoint(origin_coord),
        destination=_waypoint(destination_coord),
        travel_mode=routing_v2.RouteTravelMode.DRIVE
    )
    metadata = (("x-goog-fieldmask", ROUTE_FIELD_MASK),)

    response = await client.compute_routes(request=request, metadata=metadata)
    if response.routes:
        return response.routes[0]

    logger.warning(f"No driving route found between {origin_coord} and {destination_coord}")
    return None
