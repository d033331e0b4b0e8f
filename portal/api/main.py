"""
FastAPI app assembly: logging, middleware, exception mapping and router
wiring.
"""
import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Configure logging
LOG_LEVEL_NAME = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)
logger.info("app_startup: log_level=%s", LOG_LEVEL_NAME)

from portal.api.apps import router as apps_router
from portal.api.health import router as health_router
from portal.api.identity_providers import router as identity_providers_router
from portal.api.network import router as network_router
from portal.api.notifications import router as notifications_router
from portal.api.registration import router as registration_router
from portal.api.service_provider import router as service_provider_router
from portal.api.services import router as services_router
from portal.api.subscription_configuration import router as subscription_configuration_router
from portal.errors import register_exception_handlers
from portal.utils.runtime import dev_mode_active
from portal.utils.settings import get_settings

# Database schema is managed by Alembic migrations.

app = FastAPI(
    title="Business Partner Portal",
    description="API for partner registration, marketplace subscriptions, consents and identity providers.",
    version="1.0.0",
)

# Avoid implicit trailing-slash redirects for predictable URLs
app.router.redirect_slashes = False

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

if dev_mode_active():
    logger.warning("DEV_MODE active: every request runs as the development user")

app.include_router(health_router)
app.include_router(network_router)
app.include_router(registration_router)
app.include_router(subscription_configuration_router)
app.include_router(service_provider_router)
app.include_router(identity_providers_router)
app.include_router(apps_router)
app.include_router(services_router)
app.include_router(notifications_router)
