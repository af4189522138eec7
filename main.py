from dotenv import load_dotenv
from loguru import logger

from src.api.chat_server import run_server
from src.config import configure_logging, get_settings

load_dotenv()


if __name__ == "__main__":
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting lookup assistant")
    run_server(host=settings.host, port=settings.port)
