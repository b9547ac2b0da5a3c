"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import models  # noqa: F401  (registers tables on Base.metadata)
from app.config import settings
from app.db.database import engine, Base

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create tables (dev only; use Alembic in production)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    # Shutdown: close connections
    await engine.dispose()


app = FastAPI(
    title="Duo Tree API",
    description="Backend API for Duo Tree - paired habit tracking that grows a shared tree",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # TODO: restrict to the mobile app origins once they are fixed
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Routes ---
from app.api.routes import duos, habits, trees, levels  # noqa: E402

app.include_router(duos.router, prefix="/api/duos", tags=["duos"])
app.include_router(habits.router, prefix="/api/habits", tags=["habits"])
app.include_router(trees.router, prefix="/api/trees", tags=["trees"])
app.include_router(levels.router, prefix="/api/levels", tags=["levels"])


@app.get("/health")
async def health_check():
    return {"status": "ok"}
