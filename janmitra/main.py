from fastapi import FastAPI, Request, staticfiles
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from janmitra.config import Settings
from janmitra.database import create_db_engine, create_session_factory
from janmitra.exceptions import JanmitraError, StoreUnavailable
from janmitra.storage import PhotoStorage
from janmitra.domain.model_base import Base
from janmitra.domain.user import models as user_models # noqa: F401
from janmitra.domain.session import models as session_models # noqa: F401
from janmitra.domain.issue import models as issue_models # noqa: F401
from janmitra.domain.volunteer import models as volunteer_models # noqa: F401
from janmitra.routers import auth, issues, admin, volunteers, develop, router
from fastapi_pagination import add_pagination
from fastapi_pagination.utils import disable_installed_extensions_check
from contextlib import asynccontextmanager
import logging

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Creating missing tables...")
    Base.metadata.create_all(bind=app.state.engine)

    yield


async def janmitra_error_handler(request: Request, exc: JanmitraError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code}
    )

async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"Storage error on {request.method} {request.url.path}: {exc}")
    return await janmitra_error_handler(request, StoreUnavailable())


def get_application(settings: Settings | None = None) -> FastAPI:
    """
    Function responsible for preparing the FastAPI application.

    Everything a request needs (settings, session factory, photo storage)
    is kept on `app.state` and handed out by the dependencies.
    """

    settings = settings or Settings.from_env()

    fapp = FastAPI(
        title="Janmitra",
        swagger_ui_parameters={
            "syntaxHighlight.theme": "obsidian"
        },
        lifespan=lifespan
    )

    engine = create_db_engine(settings.database_url)

    fapp.state.settings = settings
    fapp.state.engine = engine
    fapp.state.session_factory = create_session_factory(engine)
    fapp.state.storage = PhotoStorage(settings.image_dir, settings.image_url)

    fapp.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    disable_installed_extensions_check()

    fapp.add_exception_handler(JanmitraError, janmitra_error_handler)
    fapp.add_exception_handler(SQLAlchemyError, store_error_handler)

    fapp.include_router(router)
    fapp.include_router(auth.router)
    fapp.include_router(issues.router)
    fapp.include_router(admin.router)
    fapp.include_router(volunteers.router)

    if not settings.is_production:
        fapp.include_router(develop.router)

    add_pagination(fapp)

    fapp.mount(
        settings.image_url.rstrip("/"),
        staticfiles.StaticFiles(directory=settings.image_dir),
        name="uploads"
    )

    return fapp



app = get_application()
