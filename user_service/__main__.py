# user_service/__main__.py

from user_service.main import run


run()
