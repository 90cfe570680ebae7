# /concierge/main.py

import os
import time
import logging
import uvicorn
import asyncio
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from concierge.config.settings import settings
from concierge.utils.errors import ConciergeError
from concierge.utils.lifecycle import lifespan
from concierge.utils.metrics import response_time_histogram
from concierge.utils.rate_limiter import limiter
from concierge.routes import public, chat, workflows, tasks

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Move Concierge API",
    version="1.0.0",
    description="Decision engine behind the moving assistant: chat turns, qualifying workflows and task generation",
    lifespan=lifespan,
    openapi_url=f"/api/{settings.api_version}/openapi.json" if settings.environment != "production" else None,
    docs_url=f"/api/{settings.api_version}/docs" if settings.environment != "production" else None,
    redoc_url=f"/api/{settings.api_version}/redoc" if settings.environment != "production" else None,
)


# --- Error Handling ---
@app.exception_handler(ConciergeError)
async def concierge_error_handler(request: Request, exc: ConciergeError):
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": exc.code, "message": exc.message}},
    )


# --- Rate Limiting ---
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(SlowAPIMiddleware)


@app.middleware("http")
async def performance_middleware(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response_time_histogram.labels(endpoint=request.url.path).observe(process_time)
    response.headers["X-Process-Time"] = str(process_time)
    return response


@app.middleware("http")
async def timeout_middleware(request: Request, call_next):
    try:
        return await asyncio.wait_for(call_next(request), timeout=settings.request_deadline_seconds)
    except asyncio.TimeoutError:
        logger.warning(f"Request to {request.url.path} exceeded {settings.request_deadline_seconds}s deadline")
        return JSONResponse({"detail": "Request timed out"}, status_code=504)


# --- API Routers ---
app.include_router(public.router)
app.include_router(chat.router, prefix=f"/api/{settings.api_version}")
app.include_router(workflows.router, prefix=f"/api/{settings.api_version}")
app.include_router(tasks.router, prefix=f"/api/{settings.api_version}")

# --- Main Entry Point for Uvicorn (for local development) ---
if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "127.0.0.1")

    uvicorn.run(
        "concierge.main:app",
        host=host,
        port=port,
        reload=True if settings.environment == "development" else False,
        workers=settings.workers if settings.environment == "production" else 1
    )
