"""
Cashbook Ledger API - Main Application Entry Point
Running balances, filters and grouped reports over cashbook entries
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import os
import logging

from cashbook.config import settings
from cashbook.database import create_tables
from cashbook.core.error_handler import register_exception_handlers
from cashbook.core.logging_config import setup_logging
from cashbook.core.middleware import RequestTrackingMiddleware
from cashbook.routers import entries, health, ledger, reports

# Configure logging
setup_logging(log_level=os.getenv("LOG_LEVEL", settings.log_level))
logger = logging.getLogger("cashbook.main")

app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    debug=settings.debug,
    description="Cashbook ledger engine - deterministic running balances, compound filters and reconciled summaries."
)

register_exception_handlers(app)

app.add_middleware(RequestTrackingMiddleware)

# CORS middleware with secure configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization", "Accept", "Origin", "X-Member-Id", "X-Request-ID"],
    expose_headers=["X-Request-ID", "X-Process-Time"]
)


@app.on_event("startup")
def on_startup():
    create_tables()
    logger.info("Database tables created/verified")


@app.get("/")
async def root():
    return {
        "message": settings.app_name,
        "version": settings.version,
        "description": "Cashbook ledger and report aggregation"
    }


app.include_router(entries.router, prefix="/api")
app.include_router(ledger.router, prefix="/api")
app.include_router(reports.router, prefix="/api")
app.include_router(health.router, prefix="/api")

logger.info("Available API routes:")
for route in app.routes:
    if hasattr(route, 'path') and hasattr(route, 'methods'):
        logger.info(f"  {sorted(route.methods)} {route.path}")


if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
