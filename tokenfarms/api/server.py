# This file is the process entrypoint that serves the API with uvicorn.
# It exists so the listening host and port come from the same config as the rest of the app.

from __future__ import annotations

import logging

import uvicorn

from tokenfarms.api.api_config import get_api_config
from tokenfarms.common.logging import configure_logging

LOGGER = logging.getLogger("api")


def main() -> None:
    config = get_api_config()
    configure_logging(config.log_level)
    LOGGER.info("Token Farms API is running on %s", config.port)
    uvicorn.run("tokenfarms.api.app:app", host=config.host, port=config.port)


if __name__ == "__main__":
    main()
