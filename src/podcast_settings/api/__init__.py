import os

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from ..errors import ExternalServiceError, PersistenceError, SchemaError, ValidationError
from .routes import hosting, imports, pages, settings


def create_app(config_obj=None, components=None) -> FastAPI:
    from ..bootstrap import initialize_components
    from ..config import Config
    from ..db import close_db
    from ..i18n import initialize

    if config_obj is None:
        config_file = os.environ.get("CONFIG_FILE", "/app/config.toml")
        config_obj = Config.load_from_file(config_file)

    initialize(ui_language=config_obj.language)

    app = FastAPI(title="Podcast Settings API")

    app.state.config = config_obj
    app.state.components = components or initialize_components(config_obj)

    api_router = APIRouter(prefix="/api/v1")
    api_router.include_router(settings.router)
    api_router.include_router(hosting.router)
    api_router.include_router(imports.router)
    app.include_router(api_router)
    app.include_router(pages.router)

    @app.exception_handler(ValidationError)
    def validation_error(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=422,
            content={"success": False, "field": exc.field, "error": exc.reason},
        )

    @app.exception_handler(SchemaError)
    def schema_error(request: Request, exc: SchemaError):
        return JSONResponse(status_code=404, content={"success": False, "error": str(exc)})

    @app.exception_handler(ExternalServiceError)
    def external_service_error(request: Request, exc: ExternalServiceError):
        return JSONResponse(status_code=502, content={"success": False, "error": str(exc)})

    @app.exception_handler(PersistenceError)
    def persistence_error(request: Request, exc: PersistenceError):
        return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})

    @app.on_event("shutdown")
    def shutdown_db():
        close_db()

    return app
