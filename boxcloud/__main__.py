"""Run the API server: ``python -m boxcloud``."""

import uvicorn

from boxcloud.database.config.config import settings


def main() -> None:
    uvicorn.run("boxcloud.main:app", host="0.0.0.0", port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
