"""FastAPI application entry point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.routes import projection, scenarios
from src.config import settings

logging.basicConfig(level=settings.log_level)

app = FastAPI(
    title="Holding Projection",
    description="Multi-year NAV, dilution and IRR projection for an unlisted holding",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(projection.router)
app.include_router(scenarios.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
