import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from marketplace.core.config import DEFAULT_TOKEN_SECRET, get_settings
from marketplace.core.logging import configure_logging
from marketplace.db.base import Base, engine
from marketplace.api.routes import auth
from marketplace.api.routes import admin as admin_router
from marketplace.api.routes import categories as categories_router
from marketplace.api.routes import customers as customers_router
from marketplace.api.routes import experts as experts_router
from marketplace.api.routes import health as health_router
from marketplace.api.routes import specializations as specializations_router
from marketplace.api.routes import testimonials as testimonials_router

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)

if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.on_event("startup")
def startup():
    if settings.is_production and settings.auth_token_secret == DEFAULT_TOKEN_SECRET:
        raise RuntimeError("MARKETPLACE_AUTH_TOKEN_SECRET must be set to a strong value in production.")
    Base.metadata.create_all(bind=engine)
    logger.info("%s started (environment=%s)", settings.app_name, settings.environment)


@app.exception_handler(IntegrityError)
def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=409, content={"detail": "Request conflicts with existing data"})


@app.get("/")
def root():
    return {"message": "Expert Marketplace API running"}


app.include_router(auth.router, prefix="/api/auth")
app.include_router(health_router.router)
app.include_router(admin_router.router)
app.include_router(categories_router.router)
app.include_router(experts_router.router)
app.include_router(specializations_router.router)
app.include_router(customers_router.router)
app.include_router(testimonials_router.router)
