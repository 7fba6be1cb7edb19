from __future__ import annotations

import uvicorn

from app.config import settings
from app.logging_config import configure_logging


def run() -> None:
    configure_logging(settings.log_level)
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
