from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
import logging

# Import database components
from app.database.database import engine, Base

# Import middleware and error envelope
from app.common.middleware import AuthMiddleware, SecurityHeadersMiddleware
from app.common.errors import register_exception_handlers

# Import routers
from app.modules.auth.router import auth_router, login_router
from app.modules.clients.router import clients_router
from app.modules.establishments.router import establishments_router
from app.modules.registers.router import registers_router
from app.modules.sellers.router import sellers_router
from app.modules.suppliers.router import suppliers_router
from app.modules.brands.router import brand_router
from app.modules.categories.router import categories_router
from app.modules.tax_rates.router import tax_rates_router
from app.modules.variations.router import variations_router
from app.modules.closures.router import sales_router, closures_router
from app.modules.movements.router import movements_router
from app.modules.seed.router import seed_router

from app.core.config import settings


def import_models():
    """Register every model on Base.metadata before create_all."""
    import app.modules.auth.models
    import app.modules.audit.models
    import app.modules.clients.models
    import app.modules.establishments.models
    import app.modules.registers.models
    import app.modules.sellers.models
    import app.modules.suppliers.models
    import app.modules.brands.models
    import app.modules.categories.models
    import app.modules.tax_rates.models
    import app.modules.variations.models
    import app.modules.closures.models
    import app.modules.movements.models


import_models()

# Configure logging
logging.basicConfig(
    level=(settings.LOG_LEVEL or "").upper() or (logging.INFO if settings.is_production else logging.DEBUG),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(
    title="POS Back-Office API",
    description="Multi-tenant point-of-sale back office built with FastAPI and PostgreSQL",
    version="1.0.0",
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None
)

register_exception_handlers(app)

# Add middleware (order matters! the last one added runs first)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(AuthMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)
app.include_router(login_router)
app.include_router(clients_router)
app.include_router(establishments_router)
app.include_router(registers_router)
app.include_router(sellers_router)
app.include_router(suppliers_router)
app.include_router(brand_router)
app.include_router(categories_router)
app.include_router(tax_rates_router)
app.include_router(variations_router)
app.include_router(sales_router)
app.include_router(closures_router)
app.include_router(movements_router)
app.include_router(seed_router)

# Create database tables (use migrations in production)
if not settings.is_production:
    Base.metadata.create_all(bind=engine)

@app.get("/")
async def read_root():
    return {
        "message": "POS Back-Office API is running",
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT
    }

@app.get("/health")
async def health_check():
    return {"status": "healthy", "environment": settings.ENVIRONMENT}

@app.on_event("startup")
async def startup_event():
    logger.info("POS Back-Office API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("POS Back-Office API shutting down...")
