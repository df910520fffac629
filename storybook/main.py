from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storybook.config import config
from storybook.errors import StorybookError
from storybook.features.create_pdf.router import router as create_pdf_router
from storybook.features.stories.router import router as stories_router
from storybook.lib.catalog import get_catalog
from storybook.logger import get_logger

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # fail fast on a broken catalog
    get_catalog()
    yield


app = FastAPI(title="Storybook API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins,
    allow_credentials="*" not in config.allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],  # for the PDF download name
)

app.include_router(create_pdf_router)
app.include_router(stories_router)


@app.exception_handler(StorybookError)
async def storybook_error_handler(request: Request, exc: StorybookError):
    log.warning(f"{request.method} {request.url.path} failed: {exc.message} ({exc.details or '-'})")
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body')}: {err.get('msg')}"
        for err in exc.errors()
    )
    log.info(f"{request.method} {request.url.path} rejected: {details}")
    return JSONResponse({"error": "Invalid request", "details": details}, status_code=400)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception(f"{request.method} {request.url.path} crashed")
    return JSONResponse({"error": "Failed to generate PDF", "details": str(exc)}, status_code=500)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
