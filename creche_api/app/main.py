# Creche marketplace backend entrypoint.
# Run with: uvicorn creche_api.app.main:app --reload

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from creche_api.app.api import applications
from creche_api.app.api import apply
from creche_api.app.api import articles
from creche_api.app.api import children
from creche_api.app.api import creches
from creche_api.app.api import favorites
from creche_api.app.api import invites
from creche_api.app.api import login
from creche_api.app.api import notifications
from creche_api.app.api import profile
from creche_api.app.api import register
from creche_api.app.core.errors import AppError, app_error_handler, database_error_handler
from creche_api.app.core.settings import get_settings
from creche_api.app.db.base import Base
from creche_api.app.db.session import engine

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version=settings.api_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(SQLAlchemyError, database_error_handler)

app.include_router(register.router)
app.include_router(login.router)
app.include_router(profile.router)
app.include_router(children.router)
app.include_router(invites.router)
app.include_router(creches.router)
app.include_router(apply.router)
app.include_router(applications.router)
app.include_router(favorites.router)
app.include_router(articles.router)
app.include_router(notifications.router)


@app.get("/")
def read_root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def create_tables():
    Base.metadata.create_all(bind=engine)
    logger.info("%s ready (%s)", settings.app_name, settings.environment)
