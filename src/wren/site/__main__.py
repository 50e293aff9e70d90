"""``python -m wren.site`` serves the site with settings from the environment."""

from wren.config import AppConfig
from wren.site import create_app

if __name__ == "__main__":
    create_app(AppConfig.from_env()).run()
