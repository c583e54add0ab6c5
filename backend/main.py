"""
Billsplit Backend API

A FastAPI backend for splitting restaurant bills by item, with discounts,
service charge, tax, currency conversion and AI receipt scanning.
This module sets up the app and mounts routers - all endpoint logic is in routers/.
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Import routers
from routers import access, bills, scan


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Initialize FastAPI app
app = FastAPI(
    title="Billsplit API",
    description="API for splitting bills by item with tax, service charge and currency conversion",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials="*" not in CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    return {"status": "ok"}


# Include routers
app.include_router(bills.router)
app.include_router(scan.router)
app.include_router(access.router)
