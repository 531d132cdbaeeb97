"""Run the API with uvicorn: python -m blog_api"""

import uvicorn

from blog_api.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "blog_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
