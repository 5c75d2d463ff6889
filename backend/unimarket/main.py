"""Main FastAPI application."""
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from unimarket.config import get_settings
from unimarket.middleware.logging import LoggingMiddleware, get_logger
from unimarket.api import conversations, health
from unimarket.database import engine, Base, SessionLocal
from unimarket.seed import seed_demo_data
from unimarket.services.conversations import ConversationError, NotAParticipant

settings = get_settings()
logger = get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan - startup and shutdown."""
    # Startup
    Base.metadata.create_all(bind=engine)
    logger.info("database_tables_ready")

    if settings.seed_demo_data:
        db = SessionLocal()
        try:
            users = seed_demo_data(db)
            if users:
                logger.info("database_seeded", users=len(users))
        except Exception as e:
            logger.error("database_seed_failed", error=str(e))
            db.rollback()
        finally:
            db.close()

    yield  # App runs here

    # Shutdown
    conversations.redis_client.close()
    logger.info("shutting_down", service=settings.app_name)


# Create FastAPI app
app = FastAPI(
    title="UniMarket",
    description="Campus marketplace messaging between buyers and sellers",
    version="0.1.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

# CORS middleware - Allow frontend origins
allowed_origins = [
    "http://localhost:5173",  # Vite dev server
    "http://localhost:3000",
    settings.frontend_url,
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Trace-ID", "X-RateLimit-Limit", "X-RateLimit-Remaining"]
)

# Logging middleware
app.add_middleware(LoggingMiddleware)


@app.exception_handler(ConversationError)
async def conversation_error_handler(request: Request, exc: ConversationError):
    """Map service errors to their HTTP status."""
    logger.warning(
        "conversation_access_denied" if isinstance(exc, NotAParticipant) else "conversation_request_rejected",
        status_code=exc.status_code,
        detail=exc.detail
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report malformed input as 400 rather than 422."""
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Generic 500; details are logged by LoggingMiddleware."""
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(conversations.router, tags=["conversations"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": "0.1.0",
        "docs": "/docs" if settings.debug else "disabled",
        "endpoints": {
            "health": "/health",
            "conversations": "GET/POST /api/conversations",
            "messages": "GET/POST /api/conversations/{id}/messages"
        }
    }


# uvicorn unimarket.main:app --reload
