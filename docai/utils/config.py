"""Configuration management for the document AI service.

Loads and validates YAML configuration with defaults for the
Document AI processors, PDF rendering, and the HTTP server.
"""

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)


class ProcessorsConfig(BaseModel):
    """Processor identifiers, one per extraction capability.

    A value of ``None`` leaves the capability unconfigured.
    """

    ocr: str | None = None
    form_parser: str | None = None
    summarizer: str | None = None
    custom_extractor: str | None = None


class DocumentAIConfig(BaseModel):
    """Configuration for the Google Document AI extraction provider."""

    project_id: str | None = None
    location: str = "us"
    credential_file: str | None = None
    default_mime_type: str = "application/pdf"
    processors: ProcessorsConfig = Field(default_factory=ProcessorsConfig)

    @model_validator(mode="after")
    def _check_processor_names(self) -> "DocumentAIConfig":
        # Bare processor ids are expanded with project_id at call time.
        if self.project_id:
            return self
        bare = [
            name
            for name, processor_id in self.processors.model_dump().items()
            if processor_id and not processor_id.startswith("projects/")
        ]
        if bare:
            raise ValueError(
                "project_id is required for bare processor ids: " + ", ".join(bare)
            )
        return self


class RendererConfig(BaseModel):
    """Configuration for summary PDF rendering."""

    title: str = "Document Summary"
    page_size: Literal["A4", "LETTER"] = "A4"
    font_size: float = 11.0


class ServerConfig(BaseModel):
    """Configuration for the HTTP server."""

    host: str = "0.0.0.0"
    port: int = 8000


class AppConfig(BaseModel):
    """Top-level application configuration."""

    documentai: DocumentAIConfig = Field(default_factory=DocumentAIConfig)
    renderer: RendererConfig = Field(default_factory=RendererConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    A relative ``documentai.credential_file`` is resolved against the
    directory holding the configuration file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")

    if not path.exists():
        logger.info("No config file found at %s, using defaults", path)
        return AppConfig()

    logger.info("Loading configuration from %s", path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    config = AppConfig(**raw)

    credential_file = config.documentai.credential_file
    if credential_file and not Path(credential_file).is_absolute():
        config.documentai.credential_file = str(path.parent / credential_file)
    return config
