"""FastAPI application for the ClamCard system."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clamcard.api.endpoints import router
from clamcard.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/")
async def root():
    """Service name and version."""
    return {
        "message": f"{settings.API_TITLE} API",
        "version": settings.API_VERSION,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("clamcard.main:app", host="0.0.0.0", port=8000, reload=True)
