"""Run the service with uvicorn: ``python -m dialogue_generator``."""

import uvicorn

from dialogue_generator.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "dialogue_generator.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":  # pragma: no cover
    main()
