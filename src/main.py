import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from src.authentication.token_authentication import TokenAuthentication
from src.crud import LeaderboardStore
from src.db import create_engine, create_session_factory, create_tables
from src.exceptions import QurandleError
from src.load_secrets import Settings, load_settings
from src.routers import auth, challenge, leaderboard
from src.services.corpus_cache import CorpusCache
from src.services.corpus_client import CorpusClient
from src.services.daily_challenge import DailyChallengeService
from src.services.leaderboard import LeaderboardEngine


async def qurandle_error_handler(request: Request, exc: QurandleError) -> JSONResponse:
    """Render every QurandleError as {"message": ...}

    Server side errors are logged and answered with a generic message, so no
    upstream detail reaches the client.
    """
    message = exc.message
    if exc.status_code >= 500:
        logging.error(f"{request.method} {request.url.path} failed: {exc!r}")
        message = getattr(exc, "public_message", "Internal server error.")
    return JSONResponse(status_code=exc.status_code, content={"message": message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'][1:]) or 'body'}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(status_code=400, content={"message": f"Invalid request: {details}"})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "Endpoint not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code, content={"message": message}, headers=exc.headers
    )


def create_app(
    settings: Optional[Settings] = None,
    corpus_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the application. Components are created in the lifespan and kept on app.state.

    Args:
        settings (Settings, optional): Defaults to the environment / .env.
        corpus_transport (httpx.AsyncBaseTransport, optional): Replaces the network transport of the corpus client.
    """
    settings = settings or load_settings()
    logging.basicConfig(level=settings.log_level)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the database, the corpus client and the optional cache.
        This function is called to start the server.
        """
        engine = create_engine(settings)
        await create_tables(engine)
        Session = create_session_factory(engine)

        cache = None
        if settings.redis_url:
            cache = CorpusCache.from_url(
                settings.redis_url,
                settings.corpus_cache_ttl,
                settings.corpus_cache_timeout_seconds,
            )
        corpus = CorpusClient.create(
            settings.corpus_base_url,
            settings.corpus_timeout_seconds,
            cache=cache,
            transport=corpus_transport,
        )
        service = DailyChallengeService(corpus, settings.challenge_timezone)

        app.state.settings = settings
        app.state.token_auth = TokenAuthentication(
            Session,
            settings.jwt_secret_key,
            settings.pepper_data,
            settings.token_expire_minutes,
            timeout=settings.store_timeout_seconds,
        )
        app.state.leaderboard_engine = LeaderboardEngine(
            LeaderboardStore(Session),
            size=settings.leaderboard_size,
            max_attempts=settings.leaderboard_max_attempts,
            timeout=settings.store_timeout_seconds,
        )
        app.state.daily_challenge_service = service

        # With a cache, fetch the new day's challenges just after local midnight
        scheduler = None
        if cache is not None:
            scheduler = AsyncIOScheduler()
            scheduler.add_job(
                service.warm_daily_challenges,
                "cron",
                hour=0,
                minute=1,
                timezone=settings.challenge_timezone,
            )
            scheduler.start()
        try:
            yield
        finally:
            if scheduler is not None:
                scheduler.shutdown()
            await corpus.close()
            if cache is not None:
                await cache.close()
            await engine.dispose()
            logging.info("Stop Server")

    app = FastAPI(title="Qurandle", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logging.info(f"Received {request.method} request for {request.url.path}")
        response = await call_next(request)
        # Challenges change at local midnight, error bodies included
        if request.url.path == "/daily-challenge":
            response.headers["Cache-Control"] = "no-store"
        return response

    app.add_exception_handler(QurandleError, qurandle_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    @app.get("/")
    async def read_root():
        return {"message": "Qurandle backend is running"}

    app.include_router(auth.auth_router)
    app.include_router(leaderboard.leaderboard_router)
    app.include_router(challenge.challenge_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
