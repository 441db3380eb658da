from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.routers import purchase_requisitions, dashboard, notifications
from app.config import settings
import logging
import sys

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)

# Log startup information
logger.info("="*60)
logger.info("Starting Smart Storage API")
logger.info("="*60)
logger.info(f"Purchase order required on receive: {settings.workflow_requires_purchase_order}")
logger.info(f"Approval required: {settings.workflow_requires_approval}")
logger.info(f"Reject unknown receive lines: {settings.receive_reject_unknown_lines}")
logger.info("="*60)

# Tables are created by Alembic migrations

app = FastAPI(
    title="Smart Storage API",
    description="API for purchase requisitions, goods receipt and store stock",
    version="1.0.0"
)


def parse_cors_origins(origins_str: str) -> list:
    """Parse CORS origins string into a list."""
    return [origin.strip() for origin in origins_str.split(",") if origin.strip()]


cors_origins = parse_cors_origins(settings.cors_origins)
# Default origins for local development
default_origins = ["http://localhost:3000", "http://localhost:5173"]
all_origins = cors_origins if cors_origins else default_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=all_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Include routers
app.include_router(purchase_requisitions.router)
app.include_router(dashboard.router)
app.include_router(notifications.router)


@app.get("/")
def root():
    return {"message": "Smart Storage API", "version": "1.0.0"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}


# Exception handler to ensure CORS headers are always sent
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to ensure CORS headers are sent even on errors"""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {str(exc)}", exc_info=True)

    origin = request.headers.get("origin", "")
    headers = {}
    if origin in all_origins:
        headers = {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
        }

    return JSONResponse(
        status_code=500,
        content={"detail": f"Internal server error: {str(exc)}"},
        headers=headers
    )
