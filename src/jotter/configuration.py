# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Optional, TypedDict

from yaml import load

try:
    from yaml import CSafeLoader as Loader
except ImportError:
    from yaml import SafeLoader as Loader  # type: ignore[assignment]
import platformdirs

from jotter.template.note import DEFAULT_FOLDER, DEFAULT_TITLE

APP_NAME = "jotter"

CONFIG_PATH = platformdirs.user_config_path(APP_NAME)
APP_CONFIG_PATH = CONFIG_PATH / "config.yaml"

LOG_PATH: Path = platformdirs.user_log_path(APP_NAME)
LOG_FILE_PATH: Path = LOG_PATH / "jotter.log"

# Set dynamically by load_data_path_configuration()
DATA_PATH: Path = platformdirs.user_data_path(APP_NAME)


class Configuration(TypedDict):
    data_path: Optional[str]
    storage_key: str
    default_title: str
    default_folder: str
    log_level: str


def get_default_configuration() -> Configuration:
    return {
        "data_path": None,
        "storage_key": "savedNotes",
        "default_title": DEFAULT_TITLE,
        "default_folder": DEFAULT_FOLDER,
        "log_level": "INFO",
    }


def load_data_path_configuration() -> None:
    """
    Load the configuration and set DATA_PATH dynamically.

    This must be called after the config file exists and before the note
    store touches its backing storage.
    """
    global DATA_PATH

    data_path = platformdirs.user_data_path(APP_NAME)
    if APP_CONFIG_PATH.is_file():
        config = load(APP_CONFIG_PATH.read_text(), Loader=Loader)
        if config is not None and config.get("data_path") is not None:
            data_path = Path(config["data_path"]).expanduser()

    DATA_PATH = data_path
