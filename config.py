# config.py
import os
import sys
import logging
from dotenv import load_dotenv
from reminder_core import ConfigError

load_dotenv()

APP_NAME = "cronminder"
VERSION = "0.1.0"
ICON_PATH = os.path.join(os.path.dirname(__file__), "icon.ico")

CONFIG_DIR = os.path.join(
    os.getenv("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config"),
    APP_NAME,
)
DEFAULT_CONFIG_PATH = os.getenv("CRONMINDER_CONFIG", os.path.join(CONFIG_DIR, "default-config.toml"))
LOG_FILE = os.getenv("CRONMINDER_LOG_FILE", os.path.join(CONFIG_DIR, "cronminder.log"))


def _env_number(name, default, cast):
    raw = os.getenv(name, default)
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {raw!r}")
    return value


def get_poll_interval():
    """Seconds to sleep between watch ticks."""
    return _env_number("CRONMINDER_POLL_INTERVAL", "1", float)


def get_notification_timeout():
    return _env_number("CRONMINDER_NOTIFICATION_TIMEOUT", "10", int)


def setup_logging(name=APP_NAME, level=logging.INFO):
    log_dir = os.path.dirname(LOG_FILE)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(LOG_FILE, encoding="utf-8"),
            logging.StreamHandler(sys.stdout)
        ]
    )
    return logging.getLogger(name)
