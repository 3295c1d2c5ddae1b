"""Run the game server: ``python -m dnd_engine``."""

from __future__ import annotations

import uvicorn

from dnd_engine.core.config import get_settings
from dnd_engine.server import create_app


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
