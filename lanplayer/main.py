"""Entry: start the status service."""
import logging
import uvicorn

from lanplayer.config import API_HOST, API_PORT

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    uvicorn.run(
        "lanplayer.api.app:app",
        host=API_HOST,
        port=API_PORT,
    )
