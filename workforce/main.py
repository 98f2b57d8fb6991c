# workforce/main.py
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import exc as sa_exc
from workforce.config import settings
from workforce.database import Base, engine
from workforce.core.exceptions import DomainError
from workforce.routers import admin, attendance, qr, shifts
import workforce.models  # noqa: F401  registers tables on Base.metadata

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# Create DB Tables (migrations are managed outside this service)
@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        try:
            await conn.run_sync(Base.metadata.create_all)
        except sa_exc.IntegrityError as e:
            msg = str(getattr(e, "orig", e))
            if "already exists" in msg:
                logging.warning("Ignored duplicate DDL error during create_all: %s", msg)
            else:
                raise
    yield
    await engine.dispose()


app = FastAPI(title="Workforce - Attendance & Shift Swap Service", version="1.0", lifespan=lifespan)

# Include Routers
app.include_router(attendance.router)
app.include_router(qr.router)
app.include_router(shifts.router)
app.include_router(admin.router)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    # Expected, user-actionable failures: not logged as errors
    logger.info("%s %s -> %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Operation failed."})


@app.get("/")
def read_root():
    return {"message": "Workforce attendance service"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("workforce.main:app", host="0.0.0.0", port=8000, reload=True)
