"""
Health and build information endpoints.
"""
from __future__ import annotations

import os

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check():
    return {"status": "ok", "service": "portal-backend"}


@router.get("/build-info")
def get_build_info():
    """Return build and deployment information for the running service."""
    build_sha = os.getenv("BUILD_SHA")
    build_timestamp = os.getenv("BUILD_TIMESTAMP")
    image_tag = os.getenv("IMAGE_TAG")
    version = os.getenv("VERSION", "unknown")

    return {
        "build_sha": build_sha if build_sha else None,
        "build_timestamp": build_timestamp if build_timestamp else None,
        "image_tag": image_tag if image_tag else None,
        "service_name": "portal-backend",
        "version": version,
    }
