"""Error kinds raised by the services and translated to HTTP by the routes."""


class RideShareError(Exception):
    status_code = 500


class NotFound(RideShareError):
    status_code = 404


class Forbidden(RideShareError):
    status_code = 403


class Conflict(RideShareError):
    status_code = 409


class CapacityExceeded(RideShareError):
    status_code = 409


class InvalidState(RideShareError):
    status_code = 400


class InvalidFormat(RideShareError):
    status_code = 400
