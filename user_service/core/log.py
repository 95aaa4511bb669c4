# user_service/core/log.py

import logging


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "info"):
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("user_service").setLevel(level.upper())
