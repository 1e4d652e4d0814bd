import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from uniride.auth.router import router as auth_router
from uniride.config import settings
from uniride.database.base import Base, engine
from uniride.routes import admin, colleges, rides, users

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    if not settings.ADMIN_PASSWORD:
        logger.warning("ADMIN_PASSWORD is not set; admin password login is disabled")
    yield

app = FastAPI(title="Uni Ride", lifespan=lifespan, debug=settings.DEBUG)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Missing or invalid fields",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# Include routers
app.include_router(colleges.router)
app.include_router(auth_router)
app.include_router(users.router)
app.include_router(rides.router)
app.include_router(admin.router)


@app.get("/health")
def health_check():
    return {"status": "ok", "message": "Uni Ride is running"}


# Run the application
if __name__ == "__main__":
    uvicorn.run("uniride.main:app", host="127.0.0.1", port=8000, reload=settings.DEBUG)
