"""
Loan Service API Application Factory
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import LoanServiceConfig, get_config
from ..exceptions import LoanServiceError
from ..logging_config import get_logger
from ..seed import seed_demo_data
from ..system import LoanSystem
from .customers import router as customers_router
from .loans import router as loans_router


logger = get_logger("loan_service.api")


def create_app(system: Optional[LoanSystem] = None,
               config: Optional[LoanServiceConfig] = None) -> FastAPI:
    """
    Create and configure the FastAPI application

    Args:
        system: Loan system to serve; when omitted one is opened from
            configuration at startup and closed at shutdown
        config: Configuration (defaults to the global configuration)
    """
    config = config or get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned_system = None
        if app.state.loan_system is None:
            # StorageError here aborts startup
            owned_system = LoanSystem.from_config(config)
            if config.seed_demo_data:
                seed_demo_data(owned_system)
            app.state.loan_system = owned_system

        yield

        if owned_system is not None:
            owned_system.close()
            app.state.loan_system = None

    app = FastAPI(
        title="Loan Service API",
        description="Loan issuing with simple-interest EMIs, payments, ledgers and customer overviews",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.loan_system = system

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(LoanServiceError)
    async def loan_service_error_handler(request: Request, exc: LoanServiceError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Request body must be a JSON object"})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    app.include_router(loans_router, prefix=f"{config.api_prefix}/loans", tags=["Loans"])
    app.include_router(customers_router, prefix=f"{config.api_prefix}/customers", tags=["Customers"])

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "loan_service",
            "version": __version__
        }

    @app.get(config.api_prefix)
    def get_api_info():
        """Get API information"""
        return {
            "name": "Loan Service API",
            "version": __version__,
            "message": "Hello World",
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "loans": f"{config.api_prefix}/loans",
                "customers": f"{config.api_prefix}/customers"
            }
        }

    return app

