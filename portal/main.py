from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .database import engine, Base
from . import models  # noqa: F401 - registers tables on Base.metadata
from .routers import auth, jobs, quotes, ai_quote, dashboard

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("portal")

Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Property Services Portal",
    description="Service requests, AI-assisted quotes and bundled technician dispatch",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(auth.router, prefix="/api")
app.include_router(jobs.router, prefix="/api")
app.include_router(quotes.router, prefix="/api")
app.include_router(ai_quote.router, prefix="/api")
app.include_router(dashboard.router, prefix="/api")

logger.info("%s started", settings.APP_NAME)


@app.get("/health")
def health():
    return {"status": "ok", "app": settings.APP_NAME}
