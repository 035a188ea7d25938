"""Google Cloud Document AI extraction provider.

Calls a Document AI processor and converts the returned ``Document``
proto (pages, form fields, tables, layouts, text anchors, entities)
into the internal raw document model.
"""

import asyncio

from google.api_core import exceptions as api_exceptions
from google.api_core.client_options import ClientOptions
from google.auth import exceptions as auth_exceptions
from google.cloud import documentai
from google.oauth2 import service_account

from docai.canonical.models import (
    RawCell,
    RawDocument,
    RawEntity,
    RawFormField,
    RawPage,
    RawRow,
    RawTable,
    TextAnchor,
    TextSpan,
)
from docai.errors import ProviderError, ProviderErrorKind
from docai.utils.config import DocumentAIConfig
from docai.utils.logger import get_logger

logger = get_logger(__name__)

# Checked in order; the first matching exception family wins.
_ERROR_KINDS: list[tuple[tuple[type[Exception], ...], ProviderErrorKind]] = [
    (
        (api_exceptions.BadRequest, api_exceptions.FailedPrecondition),
        ProviderErrorKind.INVALID_INPUT,
    ),
    (
        (api_exceptions.Unauthenticated, api_exceptions.Unauthorized),
        ProviderErrorKind.UNAUTHENTICATED,
    ),
    (
        (api_exceptions.PermissionDenied, api_exceptions.Forbidden),
        ProviderErrorKind.PERMISSION_DENIED,
    ),
    (
        (api_exceptions.ResourceExhausted, api_exceptions.TooManyRequests),
        ProviderErrorKind.QUOTA_EXCEEDED,
    ),
    (
        (
            api_exceptions.ServiceUnavailable,
            api_exceptions.DeadlineExceeded,
            api_exceptions.InternalServerError,
        ),
        ProviderErrorKind.UNAVAILABLE,
    ),
    ((auth_exceptions.GoogleAuthError,), ProviderErrorKind.UNAUTHENTICATED),
]


def classify_error(exc: Exception) -> ProviderErrorKind:
    """Map a Google client exception to a provider error kind."""
    for exc_types, kind in _ERROR_KINDS:
        if isinstance(exc, exc_types):
            return kind
    return ProviderErrorKind.UNKNOWN


def _convert_anchor(text_anchor: documentai.Document.TextAnchor) -> TextAnchor:
    # start_index is omitted on the wire when it is 0.
    return TextAnchor(
        spans=tuple(
            TextSpan(int(segment.start_index), int(segment.end_index))
            for segment in text_anchor.text_segments
        )
    )


def _layout_anchor(layout: documentai.Document.Page.Layout) -> TextAnchor | None:
    if "text_anchor" not in layout:
        return None
    return _convert_anchor(layout.text_anchor)


def _optional_layout_anchor(message, field_name: str) -> TextAnchor | None:
    if field_name not in message:
        return None
    return _layout_anchor(getattr(message, field_name))


def _convert_rows(rows) -> tuple[RawRow, ...]:
    return tuple(
        RawRow(
            cells=tuple(
                RawCell(layout_anchor=_optional_layout_anchor(cell, "layout"))
                for cell in row.cells
            )
        )
        for row in rows
    )


def _convert_page(page: documentai.Document.Page) -> RawPage:
    form_fields = tuple(
        RawFormField(
            name_anchor=_optional_layout_anchor(form_field, "field_name"),
            value_anchor=_optional_layout_anchor(form_field, "field_value"),
        )
        for form_field in page.form_fields
    )
    tables = tuple(
        RawTable(
            header_rows=_convert_rows(table.header_rows),
            body_rows=_convert_rows(table.body_rows),
        )
        for table in page.tables
    )
    return RawPage(form_fields=form_fields, tables=tables)


def _convert_entity(entity: documentai.Document.Entity) -> RawEntity:
    # Generated text (e.g. summaries) carries a content-only anchor with no
    # segments; the literal mention text is authoritative then.
    mention_anchor = None
    if "text_anchor" in entity and entity.text_anchor.text_segments:
        mention_anchor = _convert_anchor(entity.text_anchor)
    return RawEntity(
        type=entity.type_,
        confidence=entity.confidence,
        mention_anchor=mention_anchor,
        mention_text=entity.mention_text or None,
    )


def convert_document(document: documentai.Document) -> RawDocument:
    """Convert a Document AI ``Document`` into a raw document.

    Args:
        document: Document returned by a processor.

    Returns:
        Raw document sharing no objects with ``document``.
    """
    return RawDocument(
        full_text=document.text,
        pages=tuple(_convert_page(page) for page in document.pages),
        entities=tuple(_convert_entity(entity) for entity in document.entities),
    )


class GoogleDocumentAIProvider:
    """Extraction provider backed by Google Cloud Document AI.

    The API client is created on first use with the regional endpoint
    and, when configured, explicit service-account credentials. Its gRPC
    channel belongs to the event loop it was created in, so a new client
    is built whenever the provider is used from a different loop.

    Args:
        config: Document AI configuration.
        client: Pre-built async client, mainly for tests.
    """

    def __init__(
        self,
        config: DocumentAIConfig,
        client: documentai.DocumentProcessorServiceAsyncClient | None = None,
    ) -> None:
        self.config = config
        self._client = client
        # None for an injected client, which is used as given.
        self._client_loop: asyncio.AbstractEventLoop | None = None

    def _get_client(self) -> documentai.DocumentProcessorServiceAsyncClient:
        """Lazily initialize the Document AI client for the running loop.

        Returns:
            Initialized async client.
        """
        loop = asyncio.get_running_loop()
        stale = self._client_loop is not None and self._client_loop is not loop
        if self._client is None or stale:
            options = ClientOptions(
                api_endpoint=f"{self.config.location}-documentai.googleapis.com"
            )
            credentials = None
            if self.config.credential_file:
                credentials = service_account.Credentials.from_service_account_file(
                    self.config.credential_file
                )
                logger.info(
                    "Loaded Document AI credentials from %s",
                    self.config.credential_file,
                )
            self._client = documentai.DocumentProcessorServiceAsyncClient(
                client_options=options, credentials=credentials
            )
            self._client_loop = loop
        return self._client

    def processor_name(self, processor_id: str) -> str:
        """Expand a bare processor id into a full resource name.

        Full ``projects/...`` names are returned unchanged.

        Raises:
            ProviderError: If a bare id is given without a project id.
        """
        if processor_id.startswith("projects/"):
            return processor_id
        if not self.config.project_id:
            raise ProviderError(
                f"project_id is required to resolve processor id {processor_id!r}",
                ProviderErrorKind.UNKNOWN,
                processor_id,
            )
        return documentai.DocumentProcessorServiceClient.processor_path(
            self.config.project_id, self.config.location, processor_id
        )

    async def process_document(
        self, processor_id: str, content: bytes, mime_type: str
    ) -> RawDocument:
        """Process a document with a Document AI processor.

        Args:
            processor_id: Bare processor id or full resource name.
            content: Raw document bytes.
            mime_type: Document MIME type.

        Returns:
            Raw document converted from the processor output.

        Raises:
            ProviderError: If credentials cannot be loaded or the API call fails.
        """
        name = self.processor_name(processor_id)
        try:
            client = self._get_client()
        except (OSError, ValueError, auth_exceptions.GoogleAuthError) as exc:
            raise ProviderError(
                f"Could not initialize Document AI client: {exc}",
                ProviderErrorKind.UNAUTHENTICATED,
                processor_id,
            ) from exc

        request = documentai.ProcessRequest(
            name=name,
            raw_document=documentai.RawDocument(content=content, mime_type=mime_type),
        )
        try:
            response = await client.process_document(request=request)
        except (api_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as exc:
            kind = classify_error(exc)
            logger.warning("Document AI call to %s failed (%s): %s", name, kind, exc)
            raise ProviderError(str(exc), kind, processor_id) from exc

        logger.debug("Document AI returned %d pages", len(response.document.pages))
        return convert_document(response.document)
