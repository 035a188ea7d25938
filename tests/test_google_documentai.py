"""Tests for the Google Document AI provider adapter."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.api_core import exceptions as api_exceptions
from google.cloud import documentai

from docai.canonical.assembler import assemble
from docai.canonical.models import TextAnchor
from docai.errors import ProviderError, ProviderErrorKind
from docai.providers.google_documentai import (
    GoogleDocumentAIProvider,
    classify_error,
    convert_document,
)
from docai.utils.config import DocumentAIConfig

Doc = documentai.Document


def _anchor(*ranges: tuple[int, int]) -> Doc.TextAnchor:
    return Doc.TextAnchor(
        text_segments=[
            Doc.TextAnchor.TextSegment(start_index=start, end_index=end)
            for start, end in ranges
        ]
    )


def _layout(*ranges: tuple[int, int]) -> Doc.Page.Layout:
    return Doc.Page.Layout(text_anchor=_anchor(*ranges))


def _row(*layouts: Doc.Page.Layout) -> Doc.Page.Table.TableRow:
    return Doc.Page.Table.TableRow(
        cells=[Doc.Page.Table.TableCell(layout=layout) for layout in layouts]
    )


def _make_document() -> Doc:
    """Build a Document AI proto for 'Name: Bob' with a table and an entity."""
    return Doc(
        text="Name: Bob\nItem Qty\nPen 2\nInvoice #123 Total: $50",
        pages=[
            Doc.Page(
                form_fields=[
                    Doc.Page.FormField(
                        field_name=_layout((0, 4)), field_value=_layout((6, 9))
                    ),
                    Doc.Page.FormField(field_value=_layout((6, 9))),
                ],
                tables=[
                    Doc.Page.Table(
                        header_rows=[_row(_layout((10, 14)), _layout((15, 18)))],
                        body_rows=[_row(_layout((19, 22)), Doc.Page.Layout())],
                    )
                ],
            )
        ],
        entities=[
            Doc.Entity(
                type_="total_amount",
                mention_text="$50",
                confidence=0.5,
                text_anchor=_anchor((45, 48)),
            ),
            Doc.Entity(type_="summary", mention_text="An invoice.", confidence=1.0),
        ],
    )


def _make_provider(
    response: documentai.ProcessResponse | None = None,
    error: Exception | None = None,
) -> tuple[GoogleDocumentAIProvider, MagicMock]:
    client = MagicMock()
    client.process_document = AsyncMock(return_value=response, side_effect=error)
    config = DocumentAIConfig(project_id="proj", location="eu")
    return GoogleDocumentAIProvider(config, client=client), client


class TestConvertDocument:
    """Tests for converting Document AI protos to raw documents."""

    def test_text_copied(self) -> None:
        raw = convert_document(_make_document())
        assert raw.full_text.startswith("Name: Bob")

    def test_form_field_anchors(self) -> None:
        raw = convert_document(_make_document())
        fields = raw.pages[0].form_fields
        assert fields[0].name_anchor == TextAnchor.of((0, 4))
        assert fields[0].value_anchor == TextAnchor.of((6, 9))

    def test_missing_layout_becomes_none(self) -> None:
        raw = convert_document(_make_document())
        assert raw.pages[0].form_fields[1].name_anchor is None

    def test_table_rows(self) -> None:
        table = convert_document(_make_document()).pages[0].tables[0]
        assert len(table.header_rows[0].cells) == 2
        assert table.body_rows[0].cells[0].layout_anchor == TextAnchor.of((19, 22))
        assert table.body_rows[0].cells[1].layout_anchor is None

    def test_entities(self) -> None:
        entities = convert_document(_make_document()).entities
        assert entities[0].type == "total_amount"
        assert entities[0].mention_anchor == TextAnchor.of((45, 48))
        assert entities[0].confidence == pytest.approx(0.5)
        assert entities[1].mention_anchor is None
        assert entities[1].mention_text == "An invoice."

    def test_omitted_start_index_is_zero(self) -> None:
        anchor = Doc.TextAnchor(
            text_segments=[Doc.TextAnchor.TextSegment(end_index=4)]
        )
        doc = Doc(text="Name", entities=[Doc.Entity(type_="n", text_anchor=anchor)])
        assert convert_document(doc).entities[0].mention_anchor == TextAnchor.of((0, 4))

    def test_content_only_anchor_keeps_mention_text(self) -> None:
        # Summarizers anchor generated text by content, with no segments.
        entity = Doc.Entity(
            type_="summary",
            mention_text="A short summary.",
            confidence=1.0,
            text_anchor=Doc.TextAnchor(content="A short summary."),
        )
        raw = convert_document(Doc(text="Long original text", entities=[entity]))
        assert raw.entities[0].mention_anchor is None
        result = assemble(raw)
        assert result.entities[0].mention_text == "A short summary."

    def test_converted_document_assembles(self) -> None:
        result = assemble(convert_document(_make_document()))
        assert result.fields[0].name == "Name"
        assert result.fields[1].name is None
        assert result.tables[0].body == (("Pen", ""),)
        assert [e.mention_text for e in result.entities] == ["$50", "An invoice."]


class TestGoogleDocumentAIProvider:
    """Tests for the GoogleDocumentAIProvider class."""

    def test_processor_name_expands_bare_id(self) -> None:
        provider, _ = _make_provider()
        assert (
            provider.processor_name("abc123")
            == "projects/proj/locations/eu/processors/abc123"
        )

    def test_processor_name_keeps_full_name(self) -> None:
        provider, _ = _make_provider()
        name = "projects/x/locations/us/processors/y"
        assert provider.processor_name(name) == name

    def test_bare_id_without_project_raises(self) -> None:
        provider = GoogleDocumentAIProvider(DocumentAIConfig(), client=MagicMock())
        with pytest.raises(ProviderError):
            provider.processor_name("abc123")

    def test_process_document_sends_request(self) -> None:
        response = documentai.ProcessResponse(document=_make_document())
        provider, client = _make_provider(response=response)

        raw = asyncio.run(
            provider.process_document("form-1", b"%PDF", "application/pdf")
        )

        request = client.process_document.await_args.kwargs["request"]
        assert request.name == "projects/proj/locations/eu/processors/form-1"
        assert request.raw_document.content == b"%PDF"
        assert request.raw_document.mime_type == "application/pdf"
        assert len(raw.pages) == 1

    @pytest.mark.parametrize(
        ("error", "kind"),
        [
            (
                api_exceptions.InvalidArgument("bad pdf"),
                ProviderErrorKind.INVALID_INPUT,
            ),
            (
                api_exceptions.Unauthenticated("no token"),
                ProviderErrorKind.UNAUTHENTICATED,
            ),
            (
                api_exceptions.PermissionDenied("denied"),
                ProviderErrorKind.PERMISSION_DENIED,
            ),
            (
                api_exceptions.ResourceExhausted("quota"),
                ProviderErrorKind.QUOTA_EXCEEDED,
            ),
            (api_exceptions.ServiceUnavailable("down"), ProviderErrorKind.UNAVAILABLE),
            (api_exceptions.NotFound("no processor"), ProviderErrorKind.UNKNOWN),
        ],
    )
    def test_api_errors_are_wrapped(
        self, error: Exception, kind: ProviderErrorKind
    ) -> None:
        provider, _ = _make_provider(error=error)
        with pytest.raises(ProviderError) as exc_info:
            asyncio.run(
                provider.process_document("form-1", b"%PDF", "application/pdf")
            )
        assert exc_info.value.kind is kind
        assert exc_info.value.processor_id == "form-1"
        assert exc_info.value.__cause__ is error

    def test_missing_credential_file_is_unauthenticated(self, tmp_path) -> None:
        config = DocumentAIConfig(
            project_id="proj", credential_file=str(tmp_path / "missing.json")
        )
        provider = GoogleDocumentAIProvider(config)
        with pytest.raises(ProviderError) as exc_info:
            asyncio.run(provider.process_document("ocr", b"%PDF", "application/pdf"))
        assert exc_info.value.kind is ProviderErrorKind.UNAUTHENTICATED

    def test_client_rebuilt_for_each_event_loop(
        self, loop_bound_client: MagicMock
    ) -> None:
        provider = GoogleDocumentAIProvider(DocumentAIConfig(project_id="proj"))
        for _ in range(2):
            raw = asyncio.run(
                provider.process_document("form-1", b"%PDF", "application/pdf")
            )
            assert raw.full_text == "Name: Bob"
        assert loop_bound_client.call_count == 2

    def test_client_reused_within_one_event_loop(
        self, loop_bound_client: MagicMock
    ) -> None:
        provider = GoogleDocumentAIProvider(DocumentAIConfig(project_id="proj"))

        async def run_twice() -> None:
            for _ in range(2):
                await provider.process_document("form-1", b"%PDF", "application/pdf")

        asyncio.run(run_twice())
        assert loop_bound_client.call_count == 1

    def test_injected_client_used_across_event_loops(self) -> None:
        response = documentai.ProcessResponse(document=_make_document())
        provider, client = _make_provider(response=response)
        for _ in range(2):
            asyncio.run(provider.process_document("form-1", b"%PDF", "application/pdf"))
        assert client.process_document.await_count == 2


class TestClassifyError:
    """Tests for the classify_error function."""

    def test_unrelated_exception_is_unknown(self) -> None:
        assert classify_error(RuntimeError("boom")) is ProviderErrorKind.UNKNOWN

    def test_deadline_is_unavailable(self) -> None:
        error = api_exceptions.DeadlineExceeded("slow")
        assert classify_error(error) is ProviderErrorKind.UNAVAILABLE
