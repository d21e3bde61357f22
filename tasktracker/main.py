import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tasktracker.endpoints.router import api_router
from tasktracker.database.session import engine
from tasktracker.database.base import Base
from tasktracker.config.settings import settings
import tasktracker.models  # noqa: F401  registers tables on Base.metadata

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION
)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API Router
app.include_router(api_router)

@app.on_event("startup")
def startup_event():
    # Create tables if they don't exist
    Base.metadata.create_all(bind=engine)
    logger.info("Database ready at %s", engine.url.render_as_string(hide_password=True))

@app.get("/")
def root():
    return {"message": f"Welcome to {settings.PROJECT_NAME}"}
