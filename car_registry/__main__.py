"""Serve the Car Registry API with uvicorn: `python -m car_registry` or `car-registry`."""

import uvicorn

from car_registry.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "car_registry.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,  # setup_logging() in the lifespan owns the handlers
    )


if __name__ == "__main__":
    main()
