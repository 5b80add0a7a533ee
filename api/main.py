"""
StockChart API - FastAPI Backend
Daily stock price proxy for the chart viewer
"""
import logging
from contextlib import asynccontextmanager
from dotenv import load_dotenv

# Load environment variables BEFORE other imports
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import get_app_config
from routes import stocks

# Configure structured logging with correlation IDs
from services.logging_config import (
    setup_logging,
    get_logger,
    CorrelationIdMiddleware
)

config = get_app_config()
setup_logging(use_json=config.log_format == "json", level=logging.INFO)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events"""
    logger.info("StockChart API starting up")
    yield
    logger.info("StockChart API shutting down")


app = FastAPI(
    title="StockChart API",
    description="Daily stock price proxy with range filtering for the chart viewer",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Correlation ID middleware for request tracing
app.add_middleware(CorrelationIdMiddleware)

app.include_router(stocks.router, prefix="/api/stock", tags=["stock"])


@app.get("/")
async def root():
    return {"message": "StockChart API", "version": "0.1.0", "ranges": ["1m", "3m", "6m", "1y", "5y", "full"]}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
