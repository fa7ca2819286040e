"""Entry point: ``python -m search_relay`` serves the relay on HOST:PORT."""

import uvicorn

from search_relay.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "search_relay.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
