import logging
import uvicorn
from soulmatch.core import config
from soulmatch.models import init_db

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    filename=config.LOG_FILE
)


def main():
    init_db()
    logging.info(f"Starting SoulMatch API on {config.API_HOST}:{config.API_PORT}")
    uvicorn.run("soulmatch.api.server:app", host=config.API_HOST, port=config.API_PORT)


if __name__ == "__main__":
    main()
