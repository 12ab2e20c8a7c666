"""Process entry point: ``python -m taskapi``.

Startup failures are fatal: uvicorn exits with status 3 when the lifespan
cannot connect to MongoDB and with status 1 when the port cannot be bound.
"""

import uvicorn

from taskapi.config import get_settings
from taskapi.core.logging import setup_logging


def main() -> None:
    setup_logging()
    settings = get_settings()
    uvicorn.run(
        "taskapi.main:app",
        host=settings.api_host,
        port=settings.api_port,
        lifespan="on",
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    main()
