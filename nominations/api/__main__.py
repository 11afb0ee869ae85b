"""Run the nominations API with uvicorn: ``python -m nominations.api``."""

from __future__ import annotations

import uvicorn

from nominations.api.app import create_app
from nominations.config import get_config


def main() -> None:
    config = get_config()
    uvicorn.run(create_app(config), host=config.api_host, port=config.api_port)


if __name__ == "__main__":
    main()
