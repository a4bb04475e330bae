from dotenv import load_dotenv

from scoped_i18n.logging import get_module_logger
from scoped_i18n.server import create_app

load_dotenv()

logger = get_module_logger()

server_app = create_app()
logger.info("application_startup")
