import logging
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from reviewdisplay.core.config import settings
from reviewdisplay.core.log import configure_logging, log_requests

configure_logging()

from reviewdisplay.api.routes import embed, reviews, widgets
from reviewdisplay.db.session import init_db
from reviewdisplay.web import router as web_router

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"

init_db()

app = FastAPI(title="ReviewDisplay")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
)
app.middleware("http")(log_requests)

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

app.include_router(widgets.router)
app.include_router(reviews.router)
app.include_router(embed.router)
app.include_router(web_router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )
