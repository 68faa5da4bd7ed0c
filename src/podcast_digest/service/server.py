from __future__ import annotations

import uvicorn

from podcast_digest.log import configure_logging
from podcast_digest.settings import settings

from .app import build_services, create_app


def main() -> None:
    configure_logging()
    app = create_app(build_services(settings))

    config = uvicorn.Config(
        app,
        host=settings.bind_host,
        port=settings.bind_port,
        log_level=(settings.log_level or "info").lower(),
        loop="uvloop",
        http="httptools",
    )
    uvicorn.Server(config).run()


if __name__ == "__main__":
    main()
