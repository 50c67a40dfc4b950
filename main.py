"""
AutoFix Backend - Main Application

Back office API for an auto repair shop: clients, vehicles, inventory,
budgets, dashboard metrics, PDF reports and an AI diagnosis advisor.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import os
import logging

from autofix.routers import advisor, budgets, clients, dashboard, inventory, reports, search, settings, vehicles
from autofix.scheduler import start_scheduler, stop_scheduler
from autofix.services.ai_advisor import get_advisor_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    # Startup
    logger.info("Starting AutoFix Backend...")
    start_scheduler()
    yield
    # Shutdown
    logger.info("Shutting down AutoFix Backend...")
    stop_scheduler()


# Initialize FastAPI app
app = FastAPI(
    title="AutoFix API",
    description="Auto repair shop management backend",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware (configure for your domains)
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(clients.router, prefix="/api/clients", tags=["Clients"])
app.include_router(vehicles.router, prefix="/api/vehicles", tags=["Vehicles"])
app.include_router(inventory.router, prefix="/api/inventory", tags=["Inventory"])
app.include_router(budgets.router, prefix="/api/budgets", tags=["Budgets"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])
app.include_router(reports.router, prefix="/api/reports", tags=["Reports"])
app.include_router(settings.router, prefix="/api/settings", tags=["Settings"])
app.include_router(search.router, prefix="/api/search", tags=["Search"])
app.include_router(advisor.router, prefix="/api/advisor", tags=["AI Advisor"])


@app.get("/")
def read_root():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "AutoFix Backend",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
def health_check():
    """Detailed health check"""
    return {
        "status": "healthy",
        "supabase_configured": bool(os.getenv("SUPABASE_URL") and os.getenv("SUPABASE_KEY")),
        "advisor_configured": get_advisor_client().configured
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", 8000)), reload=True)
