"""FastAPI application exposing document AI capabilities.

Each extraction route selects a capability, hands the uploaded bytes to
the processor router, and serializes the canonical result (or one of
its projections). The summarize route renders the summary as a PDF.
"""

from functools import lru_cache
from pathlib import PurePath
from typing import Annotated

from fastapi import APIRouter, Depends, FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from docai.canonical.models import CanonicalResult
from docai.canonical.projections import Projection, summary_text, to_dict
from docai.errors import (
    InvalidAnchorError,
    ProviderError,
    ProviderErrorKind,
    UnknownCapabilityError,
)
from docai.providers.base import SUPPORTED_MIME_TYPES
from docai.providers.google_documentai import GoogleDocumentAIProvider
from docai.rendering.pdf_renderer import render_text_to_pdf
from docai.routing.router import Capability, ProcessorRouter
from docai.utils.config import AppConfig, load_config
from docai.utils.logger import get_logger

from .schemas import (
    CanonicalResponse,
    CapabilitiesResponse,
    EntitiesResponse,
    FieldsResponse,
    PingResponse,
)

logger = get_logger(__name__)

_PROVIDER_STATUS: dict[ProviderErrorKind, int] = {
    ProviderErrorKind.INVALID_INPUT: 422,
    ProviderErrorKind.QUOTA_EXCEEDED: 429,
    ProviderErrorKind.UNAVAILABLE: 503,
    ProviderErrorKind.UNAUTHENTICATED: 502,
    ProviderErrorKind.PERMISSION_DENIED: 502,
    ProviderErrorKind.UNKNOWN: 502,
}


@lru_cache
def get_config() -> AppConfig:
    """Load the application configuration once per process."""
    return load_config()


@lru_cache
def get_router() -> ProcessorRouter:
    """Build the processor router from configuration once per process."""
    config = get_config().documentai
    return ProcessorRouter(config, GoogleDocumentAIProvider(config))


RouterDep = Annotated[ProcessorRouter, Depends(get_router)]
ConfigDep = Annotated[AppConfig, Depends(get_config)]
UploadDep = Annotated[UploadFile | None, File()]


async def _extract(
    router: ProcessorRouter, capability: Capability, file: UploadFile | None
) -> CanonicalResult:
    """Run an uploaded file through the router, mapping errors to HTTP.

    Args:
        router: Processor router to dispatch with.
        capability: Extraction capability selected by the route.
        file: Uploaded document, if any.

    Returns:
        Canonical result for the document.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided.")
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty.")

    mime_type = file.content_type if file.content_type in SUPPORTED_MIME_TYPES else None

    try:
        return await router.route(capability, content, mime_type)
    except UnknownCapabilityError as exc:
        raise HTTPException(status_code=501, detail=str(exc)) from exc
    except ProviderError as exc:
        logger.error("Provider failed for %s: %s", capability.value, exc)
        raise HTTPException(
            status_code=_PROVIDER_STATUS[exc.kind],
            detail=f"Extraction provider error ({exc.kind.value}): {exc}",
        ) from exc
    except InvalidAnchorError as exc:
        logger.error("Malformed provider output for %s: %s", capability.value, exc)
        raise HTTPException(
            status_code=500, detail=f"Malformed provider output: {exc}"
        ) from exc


api = APIRouter(prefix="/api/document", tags=["document"])


@api.get("/ping", response_model=PingResponse)
async def ping() -> PingResponse:
    """Return a liveness message."""
    return PingResponse(message="API OK")


@api.get("/capabilities", response_model=CapabilitiesResponse)
async def list_capabilities(router: RouterDep) -> CapabilitiesResponse:
    """List capabilities with a configured processor."""
    return CapabilitiesResponse(
        capabilities=[c.value for c in router.configured_capabilities()]
    )


@api.post("/ocr", response_model=CanonicalResponse)
async def ocr(router: RouterDep, file: UploadDep = None) -> CanonicalResponse:
    """Extract text, entities, fields, and tables with the OCR processor."""
    result = await _extract(router, Capability.OCR, file)
    return CanonicalResponse(**to_dict(result, Projection.FULL))


@api.post("/form-parser", response_model=CanonicalResponse)
async def form_parser(router: RouterDep, file: UploadDep = None) -> CanonicalResponse:
    """Extract key/value fields and tables with the form parser."""
    result = await _extract(router, Capability.FORM_PARSER, file)
    return CanonicalResponse(**to_dict(result, Projection.FULL))


@api.post("/custom-extractor", response_model=EntitiesResponse)
async def custom_extractor(
    router: RouterDep, file: UploadDep = None
) -> EntitiesResponse:
    """Extract custom entities with the custom extractor processor."""
    result = await _extract(router, Capability.CUSTOM_EXTRACTOR, file)
    return EntitiesResponse(**to_dict(result, Projection.ENTITIES))


@api.post("/summarize/json", response_model=EntitiesResponse)
async def summarize_json(router: RouterDep, file: UploadDep = None) -> EntitiesResponse:
    """Summarize a document and return the summary entities as JSON."""
    result = await _extract(router, Capability.SUMMARIZE, file)
    return EntitiesResponse(**to_dict(result, Projection.ENTITIES))


@api.post(
    "/summarize",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
)
async def summarize(
    router: RouterDep, config: ConfigDep, file: UploadDep = None
) -> Response:
    """Summarize a document and return the summary rendered as a PDF."""
    result = await _extract(router, Capability.SUMMARIZE, file)
    renderer = config.renderer
    pdf_bytes = render_text_to_pdf(
        summary_text(result),
        title=renderer.title,
        page_size=renderer.page_size,
        font_size=renderer.font_size,
    )
    stem = PurePath(file.filename).stem if file and file.filename else "document"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{stem}-summary.pdf"'},
    )


@api.post("/upload", response_model=FieldsResponse)
async def upload(router: RouterDep, file: UploadDep = None) -> FieldsResponse:
    """Parse a form and return its text, fields, and entities."""
    result = await _extract(router, Capability.FORM_PARSER, file)
    return FieldsResponse(**to_dict(result, Projection.FIELDS))


app = FastAPI(
    title="Document AI API",
    description="OCR, form parsing, summarization, and custom extraction",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api)
