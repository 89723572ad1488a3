import os

import uvicorn

from aether.config import settings
from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="server")


if __name__ == "__main__":
    setup_logging(level=settings.log_level, job_name="aether_api")
    if not settings.has_weatherstack_key:
        logger.warning("AETHER_WEATHERSTACK_API_KEY is not set; current conditions will be simulated")

    uvicorn.run(
        "aether.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=False,
    )
