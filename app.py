from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from config import get_settings_module

from src.school_attendance.school_attendance.main import create_app

load_dotenv(override=False)
_settings = importlib.import_module(get_settings_module())
logging.basicConfig(
    level=getattr(_settings, "LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()


if __name__ == "__main__":
    app.run(debug=app.config["DEBUG"])
