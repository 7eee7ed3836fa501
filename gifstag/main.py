"""GifStag API server entry point."""

import logging

import uvicorn

from gifstag.api import create_api_app
from gifstag.config import settings


def main():
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    uvicorn.run(create_api_app(), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
