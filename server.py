from fastapi import FastAPI, APIRouter
from starlette.middleware.cors import CORSMiddleware
import logging

from storerate.core.config import settings
from storerate.core.errors import register_error_handlers
from storerate.db.session import db, ensure_indexes, close_mongo_connection
from storerate.routers import auth, users, stores, ratings

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Store Rating API")

# Create a router with the /api prefix
api_router = APIRouter(prefix="/api")

@api_router.get("/health")
async def health_check():
    return {"status": "healthy"}

api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(stores.router)
api_router.include_router(ratings.router)

@app.get("/")
async def root():
    return {"message": "Store Rating API is running"}

# Include the router in the main app
app.include_router(api_router)

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

register_error_handlers(app)

@app.on_event("startup")
async def startup_db_client():
    try:
        await ensure_indexes(db)
    except Exception as e:
        # Keep serving; database operations will fail until MongoDB is reachable
        logger.error(f"MongoDB index setup failed: {str(e)}")

@app.on_event("shutdown")
async def shutdown_db_client():
    close_mongo_connection()
