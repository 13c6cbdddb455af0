"""
FastAPI application entry point.

Assembles the FastAPI app with the quick-plan router.
"""

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quickplan.orchestrator.planning_api import router as planning_router
from quickplan.shared.logging import configure_logging


# ============================================================================
# Logging configuration (single source of truth for the service)
# ============================================================================
configure_logging(json_format=os.getenv("QUICKPLAN_LOG_FORMAT") == "json")


# Create FastAPI app
app = FastAPI(
    title="QuickPlan",
    description="Adaptive trip planning orchestrator with a LangGraph enrichment pipeline",
    version="0.1.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(planning_router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "QuickPlan",
        "version": "0.1.0",
        "components": {
            "orchestrator": {
                "status": "active",
                "endpoints": "/api/quick-plan",
            },
            "enrichment": {
                "status": "active (mock discovery)",
                "endpoints": "/api/quick-plan/next-question",
            },
        },
    }


@app.get("/health")
async def health():
    """Global health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
