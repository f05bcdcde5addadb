# bearer_auth/main.py
from fastapi import FastAPI
from contextlib import asynccontextmanager
import logging
from dotenv import load_dotenv
load_dotenv()

from .settings import settings
from .authenticators.errors import AuthenticatorError
from .dependencies import authenticator_clock
from .storage import get_authenticator_store, close_authenticator_store
from .web.endpoints import auth_router
from .web.error_handlers import authenticator_error_handler

# Configure logging based on debug mode setting
if not logging.getLogger().hasHandlers():
    logging.basicConfig(
        level="DEBUG" if settings.debug_mode else settings.log_level.upper(),
        format='%(asctime)s - %(name)s [%(levelname)s] - %(message)s'
    )

logger = logging.getLogger(__name__)


@asynccontextmanager
async def bearer_auth_lifespan(app_instance: FastAPI):
    """
    Application lifespan manager that initializes the configured authenticator store
    on startup and tears it down on shutdown.
    """
    logger.info("Application startup initiated.")
    try:
        store = await get_authenticator_store(authenticator_clock)
        logger.info(f"Authenticator store {type(store).__name__} initialized.")
    except Exception as e:
        logger.error(f"Error during authenticator store initialization: {e}", exc_info=True)
        raise

    yield

    logger.info("Application shutdown initiated.")
    try:
        await close_authenticator_store()
    except Exception as e_td:
        logger.error(f"Teardown error: {e_td}", exc_info=True)
    logger.info("All components torn down.")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        lifespan=bearer_auth_lifespan,
    )
    app.add_exception_handler(AuthenticatorError, authenticator_error_handler)
    app.include_router(auth_router, prefix="/auth")

    @app.get("/health")
    async def health_check() -> dict:
        return {"status": "healthy"}

    return app


app = create_app()
