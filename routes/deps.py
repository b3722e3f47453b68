from fastapi import HTTPException, Request
from errors import RideShareError

def get_store(request: Request):
    store = getattr(request.app.state, "store", None)
    if not store:
        raise HTTPException(status_code=500, detail="Firestore not initialized")
    return store

def get_user_id(request: Request):
    """Caller identity, set by the gateway after authentication"""
    user_id = request.headers.get("X-User-ID")
    if not user_id:
        raise HTTPException(status_code=401, detail="Missing user ID")
    return user_id

def http_error(exc: RideShareError):
    return HTTPException(status_code=exc.status_code, detail=str(exc))
