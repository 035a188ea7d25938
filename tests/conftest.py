"""Shared test fixtures for the document AI test suite."""

import asyncio
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from google.cloud import documentai

from docai.canonical.models import (
    RawCell,
    RawDocument,
    RawEntity,
    RawFormField,
    RawPage,
    RawRow,
    RawTable,
    TextAnchor,
)
from docai.routing.router import ProcessorRouter
from docai.utils.config import DocumentAIConfig, ProcessorsConfig


@pytest.fixture
def invoice_document() -> RawDocument:
    """A one-page invoice with a field, a table, and an entity."""
    text = "Name: Bob\nItem Qty\nPen 2\nInvoice #123 Total: $50"
    return RawDocument(
        full_text=text,
        pages=(
            RawPage(
                form_fields=(
                    RawFormField(
                        name_anchor=TextAnchor.of((0, 4)),
                        value_anchor=TextAnchor.of((6, 9)),
                    ),
                ),
                tables=(
                    RawTable(
                        header_rows=(
                            RawRow(
                                cells=(
                                    RawCell(TextAnchor.of((10, 14))),
                                    RawCell(TextAnchor.of((15, 18))),
                                )
                            ),
                        ),
                        body_rows=(
                            RawRow(
                                cells=(
                                    RawCell(TextAnchor.of((19, 22))),
                                    RawCell(TextAnchor.of((23, 24))),
                                )
                            ),
                        ),
                    ),
                ),
            ),
        ),
        entities=(
            RawEntity(
                type="total_amount",
                confidence=0.92,
                mention_anchor=TextAnchor.of((45, 48)),
            ),
        ),
    )


@pytest.fixture
def processors_config() -> DocumentAIConfig:
    """Config with every capability except the custom extractor."""
    return DocumentAIConfig(
        project_id="test-project",
        processors=ProcessorsConfig(
            ocr="projects/test-project/locations/us/processors/ocr-1",
            form_parser="form-1",
            summarizer="summary-1",
        ),
    )


@pytest.fixture
def mock_provider(invoice_document: RawDocument) -> AsyncMock:
    """Extraction provider returning the invoice document."""
    provider = AsyncMock()
    provider.process_document.return_value = invoice_document
    return provider


@pytest.fixture
def router(
    processors_config: DocumentAIConfig, mock_provider: AsyncMock
) -> ProcessorRouter:
    """Processor router backed by the mock provider."""
    return ProcessorRouter(processors_config, mock_provider)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


class _LoopBoundClient:
    """Async client stand-in that, like a grpc.aio channel, only works
    on the event loop it was created in."""

    def __init__(self, **kwargs) -> None:
        self.loop = asyncio.get_running_loop()

    async def process_document(self, request) -> documentai.ProcessResponse:
        if asyncio.get_running_loop() is not self.loop:
            raise RuntimeError("Event loop is closed")
        document = documentai.Document(text="Name: Bob")
        return documentai.ProcessResponse(document=document)


@pytest.fixture
def loop_bound_client() -> Iterator[MagicMock]:
    """Patch the Document AI async client class; the mock counts builds."""
    with patch.object(
        documentai, "DocumentProcessorServiceAsyncClient", side_effect=_LoopBoundClient
    ) as factory:
        yield factory
