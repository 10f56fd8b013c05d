"""
Report Card Viewer - FastAPI Application Entry Point.

This is the main application module that:
1. Initializes the FastAPI app with CORS middleware
2. Sets up structured JSON logging
3. Implements request ID middleware (X-Request-ID header)
4. Registers the students and report-card routes
5. Provides health check endpoint

Layout:
- routes/: API endpoint handlers
- models/: SQLAlchemy ORM models
- services/: record store, identity check, grade computation
- logging_config.py: Structured logging configuration
- database.py: Database connection management
"""

import os
import time
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from reportcard.logging_config import (
    setup_logging, get_logger, log_with_context,
    request_id_var, generate_request_id
)
from reportcard.errors import add_error_handlers
from reportcard.routes import students, report_card
from reportcard.database import DATABASE_URL, create_tables

# Import models so they are registered with Base.metadata
from reportcard.models.student import Student  # noqa: F401

VERSION = "1.0.0"

# Initialize structured logging before anything else
setup_logging()
logger = get_logger("http")

# Auto-create tables for SQLite local development
if DATABASE_URL.startswith("sqlite"):
    logger.info("Using SQLite, creating tables directly")
    create_tables()

app = FastAPI(
    title="Report Card Viewer",
    description=(
        "Stores student report-card records and serves them to students, "
        "who log in with their name and student ID to see their grades."
    ),
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Cross-origin requests are accepted from anywhere unless ALLOW_ORIGINS says otherwise
allow_origins = [o.strip() for o in os.getenv("ALLOW_ORIGINS", "*").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"]
)

add_error_handlers(app)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """
    Tag every request with a UUID for log tracing.

    The ID is stored in a context variable (so every log entry made while
    handling the request carries it) and returned in X-Request-ID.
    """
    req_id = generate_request_id()
    request_id_var.set(req_id)
    start_time = time.time()

    log_with_context(logger, "INFO",
        f"Request started: {request.method} {request.url.path}",
        context={"request_id": req_id},
        extra_data={
            "ip": request.client.host if request.client else "unknown",
            "user_agent": request.headers.get("user-agent", ""),
        })

    response = await call_next(request)

    duration_ms = (time.time() - start_time) * 1000
    response.headers["X-Request-ID"] = req_id

    log_with_context(logger, "INFO",
        f"Request completed: {request.method} {request.url.path} → {response.status_code}",
        context={"request_id": req_id},
        extra_data={
            "duration_ms": round(duration_ms, 2),
            "status_code": response.status_code
        })

    return response


app.include_router(students.router, tags=["Students"])
app.include_router(report_card.router, tags=["Report Card"])


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint for Docker health checks and monitoring."""
    return {"status": "healthy", "service": "report-card-backend", "version": VERSION}


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "service": "Report Card Viewer",
        "version": VERSION,
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "students_list": "GET /api/students",
            "student_detail": "GET /api/students/{id}",
            "student_create": "POST /api/students",
            "student_update": "PUT /api/students/{id}",
            "student_delete": "DELETE /api/students/{id}",
            "report_card": "POST /api/report-card"
        }
    }
