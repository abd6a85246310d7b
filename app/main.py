from fastapi import FastAPI

from app.api.routes import admin as admin_router
from app.api.routes import auth
from app.api.routes import review as review_router
from app.api.routes import services as services_router
from app.core.config import get_settings
from app.core.errors import register_error_handlers
from app.core.logging import configure_logging
from app.db.base import Base, engine


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title=get_settings().PROJECT_NAME)

    @app.on_event("startup")
    def startup():
        Base.metadata.create_all(bind=engine)

    @app.get("/")
    def root():
        return {"message": "Services Marketplace API running"}

    register_error_handlers(app)

    app.include_router(auth.router, prefix="/api/auth")
    app.include_router(services_router.router, prefix="/api")
    app.include_router(review_router.router, prefix="/api")
    app.include_router(admin_router.router, prefix="/api")
    return app


app = create_app()
