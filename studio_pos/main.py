# studio_pos/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
import uvicorn

from studio_pos.api.routers import bookings, carts, catalog, checkout, health, transactions, users
from studio_pos.data.database import Base, init_db
from studio_pos.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Initializing database...")
    try:
        init_db()
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    logger.info(f"Tables ready: {list(Base.metadata.tables.keys())}")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Studio POS",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(catalog.router)
    app.include_router(carts.router)
    app.include_router(checkout.router)
    app.include_router(bookings.router)
    app.include_router(transactions.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
