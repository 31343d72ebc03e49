import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError

from campus_connect.exceptions import DataServiceError, ValidationError
from campus_connect.logging_config import configure_logging
from campus_connect.routers import auth, student, teacher

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Campus Connect - Attendance API",
    description="Attendance reports for students and class marking for teachers",
    version="1.0.0"
)

# --- CORS Middleware ---
# The mobile client calls from arbitrary origins during development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception Handlers ---
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Custom handler for Pydantic validation errors."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": "Validation Error", "errors": exc.errors()},
    )

@app.exception_handler(ValidationError)
async def domain_validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc)},
    )

@app.exception_handler(DataServiceError)
async def data_service_error_handler(request: Request, exc: DataServiceError):
    """The hosted database could not be read or written; the client may retry."""
    logger.error("Data service call failed", extra={"path": request.url.path, "error": str(exc)})
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": f"Error from data service: {exc}"},
    )

@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Catch-all handler for unexpected errors."""
    logger.exception("Unhandled error", extra={"path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected internal server error occurred.", "error": str(exc)},
    )

# --- API Routers ---
app.include_router(auth.router)
app.include_router(student.router)
app.include_router(teacher.router)

@app.get("/", tags=["Root"])
async def read_root():
    """Root endpoint for health checks."""
    return {"message": "Welcome to Campus Connect API"}
