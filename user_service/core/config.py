# user_service/core/config.py

import os
from dotenv import load_dotenv


load_dotenv()


class Settings:
    """
    Runtime configuration read from the environment (or a local .env file).
    Every value has a default so the service starts with no setup.
    """

    def __init__(self):
        self.HOST = os.getenv("HOST", "0.0.0.0")
        self.PORT = int(os.getenv("PORT", "8080"))
        self.DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/users.db")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "info")
        self.API_KEY = os.getenv("API_KEY", "secret-key")
        self.REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "15"))
        self.IDLE_TIMEOUT = int(os.getenv("IDLE_TIMEOUT", "60"))


settings = Settings()
