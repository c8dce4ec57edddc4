"""Run the gate with uvicorn: ``python -m postgate`` or the ``postgate`` script."""

from __future__ import annotations

import uvicorn

from postgate.config import settings


def main() -> None:
    uvicorn.run(
        "postgate.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug and not settings.is_production,
        # logging is configured by postgate.main
        log_config=None,
    )


if __name__ == "__main__":
    main()
