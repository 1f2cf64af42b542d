"""
Run the API server.

    trackboard-api
    uvicorn trackboard.main:app --reload
"""
from __future__ import annotations

import uvicorn

from trackboard.core import config


def main() -> None:
    uvicorn.run(
        "trackboard.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        log_level=config.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
