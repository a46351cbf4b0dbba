import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smash.config import settings
from smash.database import init_db
from smash.routes import scheduling, tournaments

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Smash Tournament Scheduling API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(tournaments.router, prefix="/api", tags=["tournaments"])
app.include_router(scheduling.router, prefix="/api", tags=["scheduling"])


@app.on_event("startup")
def on_startup():
    init_db()
    logger.info("Registered %d routes", len(app.routes))


@app.get("/api/health")
def health_check():
    """Diagnostic endpoint"""
    return {"app_name": "Smash Tournament Scheduling API", "status": "healthy"}
