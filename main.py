from fastapi import FastAPI
from config import settings
from firebase_client import lifespan
from routes import ride_routes, booking_routes, review_routes, notification_routes, car_routes
import logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    root_path=settings.ROOT_PATH,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

@app.get("/health", include_in_schema=False)
async def health_check():
    return {"status": "ok"}

app.include_router(ride_routes.router, tags=["Rides"])
app.include_router(booking_routes.router, tags=["Bookings"])
app.include_router(review_routes.router, tags=["Reviews"])
app.include_router(notification_routes.router, tags=["Notifications"])
app.include_router(car_routes.router, tags=["Cars"])

if __name__ == "__main__":
    import uvicorn
    logging.getLogger(__name__).info(f"Starting on port {settings.PORT}")
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
