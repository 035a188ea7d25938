"""Dispatch of extraction capabilities to configured processors.

A single router replaces one handler per processor type: the caller
names a logical capability, the router looks up the processor
identifier configured for it, calls the extraction provider, and
canonicalizes the result.
"""

from enum import StrEnum

from docai.canonical.assembler import assemble
from docai.canonical.models import CanonicalResult
from docai.errors import UnknownCapabilityError
from docai.providers.base import ExtractionProvider, sniff_mime_type
from docai.utils.config import DocumentAIConfig
from docai.utils.logger import get_logger

logger = get_logger(__name__)


class Capability(StrEnum):
    """Logical extraction modes, valued by their route slug."""

    OCR = "ocr"
    FORM_PARSER = "form-parser"
    SUMMARIZE = "summarize"
    CUSTOM_EXTRACTOR = "custom-extractor"

    @classmethod
    def from_slug(cls, slug: str) -> "Capability":
        """Parse a capability from its slug.

        Raises:
            UnknownCapabilityError: If ``slug`` names no capability.
        """
        try:
            return cls(slug)
        except ValueError:
            raise UnknownCapabilityError(slug) from None


# Capability -> attribute of ProcessorsConfig.
_PROCESSOR_KEYS: dict[Capability, str] = {
    Capability.OCR: "ocr",
    Capability.FORM_PARSER: "form_parser",
    Capability.SUMMARIZE: "summarizer",
    Capability.CUSTOM_EXTRACTOR: "custom_extractor",
}


class ProcessorRouter:
    """Routes documents to the processor configured for a capability.

    Provider failures propagate unchanged and are never retried here.

    Args:
        config: Document AI configuration holding processor identifiers.
        provider: Extraction provider used to run processors.
    """

    def __init__(self, config: DocumentAIConfig, provider: ExtractionProvider) -> None:
        self.config = config
        self.provider = provider

    def processor_for(self, capability: Capability | str) -> str:
        """Return the processor identifier configured for ``capability``.

        Raises:
            UnknownCapabilityError: If ``capability`` is unknown or has no
                processor configured.
        """
        capability = Capability.from_slug(capability)
        key = _PROCESSOR_KEYS.get(capability)
        processor_id = getattr(self.config.processors, key) if key else None
        if not processor_id:
            raise UnknownCapabilityError(capability)
        return processor_id

    def configured_capabilities(self) -> list[Capability]:
        """List capabilities that have a processor configured."""
        return [
            capability
            for capability, key in _PROCESSOR_KEYS.items()
            if getattr(self.config.processors, key)
        ]

    async def route(
        self,
        capability: Capability | str,
        payload: bytes,
        mime_type: str | None = None,
    ) -> CanonicalResult:
        """Extract and canonicalize a document with the given capability.

        Args:
            capability: Extraction mode to run, or its slug.
            payload: Raw document bytes.
            mime_type: Document MIME type; sniffed from ``payload`` if omitted.

        Returns:
            Canonical result of the extraction.

        Raises:
            UnknownCapabilityError: If ``capability`` has no processor;
                raised before the provider is called.
            ProviderError: If the provider call fails.
            InvalidAnchorError: If the provider output is malformed.
        """
        capability = Capability.from_slug(capability)
        processor_id = self.processor_for(capability)
        mime_type = mime_type or sniff_mime_type(payload, self.config.default_mime_type)

        logger.info(
            "Routing %s (%d bytes, %s) to processor %s",
            capability.value,
            len(payload),
            mime_type,
            processor_id,
        )
        raw = await self.provider.process_document(processor_id, payload, mime_type)
        result = assemble(raw)
        logger.info(
            "Canonicalized %s result: %d entities, %d fields, %d tables",
            capability.value,
            len(result.entities),
            len(result.fields),
            len(result.tables),
        )
        return result
