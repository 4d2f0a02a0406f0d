import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from routes import quiz, quizzes, user
from utils.config import Settings
from utils.context import AppContext
from utils.errors import AppError
from utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, context: AppContext | None = None) -> FastAPI:
    """
    Build the application.

    A prepared `context` is used as-is and left open on shutdown (tests pass
    one with in-memory collaborators); otherwise one is built from `settings`
    at startup and closed on shutdown.
    """
    settings = settings or (context.settings if context else Settings.from_env())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ctx = context or AppContext.from_settings(settings)
        await ctx.init()
        app.state.context = ctx
        logger.info("IntelliQ backend started")
        try:
            yield
        finally:
            if context is None:
                await ctx.close()
            logger.info("IntelliQ backend stopped")

    app = FastAPI(title="IntelliQ Backend", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        log_message = f"API Error ({exc.status_code}) on {request.url.path}: {exc.message}"
        if exc.details:
            log_message += f" | Details: {exc.details}"
        logger.error(log_message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Rejected request to {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request", "details": str(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Server Error"})

    @app.get("/")
    async def home():
        return "Welcome to IntelliQ"

    app.include_router(user.router)
    app.include_router(quiz.router)
    app.include_router(quizzes.router)
    return app


def run():
    import uvicorn

    settings = Settings.from_env()
    setup_logging(settings.logging_level)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
