#!/usr/bin/env python3
import logging

from fastapi import FastAPI

from s3sync.api import router as api_router
from s3sync.aws_clients import build_s3_client
from s3sync.config import AWSConfig
from s3sync.database import init_db

app = FastAPI(title="s3sync")


@app.on_event("startup")
def on_startup():
    init_db()  # Create tables if they don't exist

    config = AWSConfig.from_settings()
    missing = config.missing_client_settings()
    if missing or not config.bucket:
        logging.warning(
            "Application started with incomplete S3 configuration - uploads are disabled "
            f"(missing: {', '.join(missing + ([] if config.bucket else ['bucket']))})"
        )
    elif build_s3_client(config) is None:
        logging.warning("Application started but the S3 client could not be created")
    else:
        logging.info("Application started with valid S3 configuration")


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(api_router, prefix="/api")
