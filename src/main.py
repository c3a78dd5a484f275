from __future__ import annotations

from fastapi import FastAPI

from src.application.dtos.common_dto import HealthResponse, RootResponse
from src.infrastructure.api.error_handlers import add_error_handlers
from src.infrastructure.api.middlewares import add_default_middlewares
from src.infrastructure.api.routes.admin_routes import router as admin_router
from src.infrastructure.api.routes.auth_routes import router as auth_router
from src.infrastructure.api.routes.directory_routes import router as directory_router
from src.infrastructure.api.routes.message_routes import router as message_router
from src.infrastructure.api.routes.post_routes import router as post_router
from src.infrastructure.api.routes.view_routes import router as view_router
from src.infrastructure.logging_config import configure_logging


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="LFG Board Backend",
        version="0.1.0",
        description="""
        ## LFG Board Backend API

        Community bulletin board for finding fellow players: announcements,
        private messages and moderation, with Supabase for auth and storage.

        ### Features
        - **Accounts**: Sign-up with a unique nickname, password sign-in, automatic profiles
        - **Posts**: Publish and browse announcements tagged with game types
        - **Private Messages**: Message other users by nickname
        - **Directory**: Search users by nickname
        - **Moderation**: Admin listings, bans and deletions

        ### Authentication
        Endpoints that act for a user expect a Bearer token in the Authorization header:
        ```
        Authorization: Bearer your-access-token
        ```

        ### Error Responses
        Errors carry a short `detail` message and a `kind`:
        - **400 validation**: A required field is missing or empty
        - **401 auth**: No active session
        - **403 forbidden**: Blocked account, blocked recipient, or not an admin
        - **404 not_found**: User, post or message does not exist
        - **409 conflict**: Nickname already taken
        - **502 store_error**: The auth or database backend failed
        """,
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )
    add_default_middlewares(app)
    add_error_handlers(app)

    @app.get("/", response_model=RootResponse, summary="API Root")
    def root():
        """Get API root information."""
        return {"status": "ok", "service": "lfgboard-backend", "version": app.version}

    @app.get("/health", response_model=HealthResponse, summary="Health Check")
    def health():
        """Check API health status."""
        return {"status": "healthy"}

    app.include_router(auth_router)
    app.include_router(post_router)
    app.include_router(message_router)
    app.include_router(directory_router)
    app.include_router(admin_router)
    app.include_router(view_router)
    return app


app = create_app()
