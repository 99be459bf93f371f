"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from journal.config import settings
from journal.database import create_db_and_tables
from journal.utils.logging import setup_logging
from journal.api import auth, coins, strategies, trades, backtest, calculator, dashboard, system


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    setup_logging()
    create_db_and_tables()
    yield


app = FastAPI(
    title="Trade Journal",
    description="Crypto trading journal: trades, coins, strategies, backtests and analytics",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(auth.router)
app.include_router(coins.router)
app.include_router(strategies.router)
app.include_router(trades.router)
app.include_router(backtest.router)
app.include_router(calculator.router)
app.include_router(dashboard.router)
app.include_router(system.router)
