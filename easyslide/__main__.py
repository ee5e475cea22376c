import logging

import uvicorn

from easyslide.settings import get_settings


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info(
        f"Slide service starting on {settings.host}:{settings.port} ({settings.mode.value} mode)"
    )
    uvicorn.run("easyslide.main:create_app", factory=True, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
