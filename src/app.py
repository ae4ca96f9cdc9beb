"""Fulfillment engine FastAPI application.

Web server that drives picking, packing and shipping over HTTP. Every
request runs inside the fulfillment domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - unset/"test" → in-memory provider
#   - "production" → PostgreSQL via DATABASE_URL
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fulfillment.api.handlers import register_error_handlers
from fulfillment.domain import fulfillment

fulfillment.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Fulfillment API",
    description="Order fulfillment workflow engine — picking, packing and shipping",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the fulfillment domain context for each request."""
    with fulfillment.domain_context():
        response = await call_next(request)
    return response


register_error_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from fulfillment.api.routes import (  # noqa: E402
    materials_router,
    orders_router,
    queues_router,
    stock_oracle_router,
)

app.include_router(orders_router)
app.include_router(queues_router)
app.include_router(materials_router)
app.include_router(stock_oracle_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {"fulfillment": {"name": fulfillment.name}},
        }
    )
