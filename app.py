#!/usr/bin/env python3
"""
FastAPI application for the Topical Authority Coach
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from topical_authority import __version__
from topical_authority.config import load_settings

# Import routers
from coach import router as coach_router

settings = load_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Initialize FastAPI app
app = FastAPI(title="Topical Authority Coach API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(coach_router)

# Root endpoint
@app.get("/")
async def root():
    """Root endpoint"""
    return {"message": "Topical Authority Coach API", "version": __version__}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
