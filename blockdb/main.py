import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from blockdb.core.config import settings
from blockdb.core.database import engine, Base
from blockdb.core.errors import BlockDbError
from blockdb.routers import health, databases, rows

logging.basicConfig(level=settings.LOG_LEVEL)

# Init DB
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="BlockDB API",
    version="0.1.0"
)

# NotFound -> 404, InvalidState -> 400, Conflict -> 409
@app.exception_handler(BlockDbError)
async def handle_blockdb_error(request: Request, exc: BlockDbError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code}
    )

# Routes
app.include_router(health.router, prefix="/health")
app.include_router(databases.router)
app.include_router(rows.router)
