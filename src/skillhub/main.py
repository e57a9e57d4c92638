"""Application entry point for SkillHub backend server."""

import uvicorn

from skillhub.app import App
from skillhub.config import Config
from skillhub.logging import setup_logging
from skillhub.web.server import create_fastapi_app


def main() -> None:
    # Fails with a pydantic ValidationError when the signing secrets are not configured
    config = Config()
    setup_logging(config.debug)
    fastapi_app = create_fastapi_app(App(config), config)
    # log_config=None keeps uvicorn from replacing the structlog handlers
    uvicorn.run(fastapi_app, host=config.host, port=config.port, log_config=None, access_log=True)


if __name__ == "__main__":
    main()
