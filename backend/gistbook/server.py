"""Console entry point: `gistbook` (or `python -m gistbook.server`)."""

import uvicorn

from gistbook.config import settings


def run() -> None:
    uvicorn.run(
        "gistbook.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
