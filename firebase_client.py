from contextlib import asynccontextmanager
from fastapi import FastAPI
import firebase_admin
from firebase_admin import credentials, firestore
from config import settings
from store import FirestoreStore
from google.maps import routing_v2
from google.oauth2 import service_account

import logging
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup ---
    db = None
    firebase_app = None
    store = None
    routes_client = None
    try:
        cred = credentials.Certificate(settings.CREDENTIALS_PATH)
        firebase_app = firebase_admin.initialize_app(cred, {
            'databaseURL': settings.DATABASE_URL
        })
        db = firestore.client(app=firebase_app, database_id=settings.FIRESTORE_DATABASE_ID)
        store = FirestoreStore(db)
        logger.info("Firebase Admin SDK initialized successfully.")
    except Exception as e:
        logger.error(f"Error initializing Firebase Admin SDK: {e}")

    try:
        routes_credentials = service_account.Credentials.from_service_account_file(
            settings.CREDENTIALS_PATH,
            scopes=['https://www.googleapis.com/auth/cloud-platform']
        )
        routes_client = routing_v2.RoutesAsyncClient(credentials=routes_credentials)
        logger.info("Google Maps Routes API client initialized successfully.")
    except Exception as e:
        logger.error(f"Error initializing Routes API client: {e}")

    app.state.db = db
    app.state.firebase_app = firebase_app
    app.state.store = store
    app.state.routes_client = routes_client
    yield

    # --- Shutdown ---
    try:
        if db:
            logger.info("Closing Firestore client...")
            db.close()
            logger.info("Firestore client closed.")
        if firebase_app:
            firebase_admin.delete_app(firebase_app)
            logger.info("Firebase Admin SDK app deleted successfully.")
    except Exception as e:
        logger.error(f"Error deleting Firebase Admin SDK app: {e}")
