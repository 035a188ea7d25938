"""Application entry point for the Document AI API server."""

import uvicorn

from docai.api.app import app, get_config
from docai.utils.logger import setup_logging


def main() -> None:
    """Start the FastAPI application server."""
    config = get_config()
    setup_logging(config.log_level)
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
