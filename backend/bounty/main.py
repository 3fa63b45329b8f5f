"""Cinderella Bounty — FastAPI application entry point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bounty.config import settings
from bounty.database import create_db_and_tables
from bounty.routers import auctions, scores, teams, trades

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create all tables on startup
create_db_and_tables()

_cors_origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()]

app = FastAPI(
    title="Cinderella Bounty",
    description="Pick the upsets, bid for contested teams, trade, and score.",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(teams.router)
app.include_router(auctions.router)
app.include_router(trades.router)
app.include_router(scores.router)


@app.get("/")
def root():
    return {
        "name": "Cinderella Bounty API",
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("bounty.main:app", host="0.0.0.0", port=8000)
