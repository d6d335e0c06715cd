# freemind_cli/config.py
# Description: Configuration management for the freemind_cli application.
#
# Imports
import copy
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional
#
# Third-Party Imports
import toml
from loguru import logger
from pydantic import BaseModel, ValidationError
#
# Local Imports
#
#######################################################################################################################
#
# Functions:

# --- Path to the CLI's configuration file ---
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "freemind" / "freemind-cli.toml"
BASE_DATA_DIR_CLI = Path.home() / ".local" / "share" / "freemind"

PLACEHOLDER_SERVER_ADDRESS = "<THE ADDRESS OF THE WEBSERVER>"
PLACEHOLDER_USERNAME = "<YOUR USERNAME>"
PLACEHOLDER_SECRET = "<YOUR TOKEN / SECRET>"

CONFIG_TOML_CONTENT = f"""
# Configuration for the Freemind command line client
# This file is created automatically on first run.

[server]
server_address = "{PLACEHOLDER_SERVER_ADDRESS}"
username = "{PLACEHOLDER_USERNAME}"
secret = "{PLACEHOLDER_SECRET}"
# "Token" or "Password"; also names the header carrying the secret
auth_method = "Token"
timeout = 30.0

[logging]
# Console log level
log_level = "WARNING"
file_log_level = "DEBUG"
log_filename = "freemind_cli.log"
log_max_bytes = 10485760
log_backup_count = 5
"""

DEFAULT_CONFIG_FROM_TOML: Dict[str, Any] = tomllib.loads(CONFIG_TOML_CONTENT)


class AuthMethod(str, Enum):
    TOKEN = "Token"
    PASSWORD = "Password"

    @property
    def header_name(self) -> str:
        return self.value.lower()

    def __str__(self) -> str:
        return self.value


class AppConfig(BaseModel):
    server_address: str
    username: str
    secret: str
    auth_method: AuthMethod = AuthMethod.TOKEN
    timeout: float = 30.0

    @classmethod
    def default(cls) -> "AppConfig":
        return cls(
            server_address=PLACEHOLDER_SERVER_ADDRESS,
            username=PLACEHOLDER_USERNAME,
            secret=PLACEHOLDER_SECRET,
        )

    @classmethod
    def empty(cls) -> "AppConfig":
        return cls(server_address="", username="", secret="")

    def _credentials(self):
        return self.server_address, self.username, self.secret, self.auth_method

    def is_default(self) -> bool:
        """True while the configuration still holds the placeholder values."""
        return self._credentials() == AppConfig.default()._credentials()

    def is_empty(self) -> bool:
        return self._credentials() == AppConfig.empty()._credentials()

    def __str__(self) -> str:
        return (
            f"Server: {self.server_address}\n"
            f"Username: {self.username}\n"
            f"Secret: {'*' * len(self.secret)}\n"
            f"Auth Method: {self.auth_method}"
        )


# --- Helper for deep merging dictionaries ---
def deep_merge_dicts(base: Dict, update: Dict) -> Dict:
    """Recursively merges update_dict into base_dict."""
    merged = copy.deepcopy(base)
    for key, value in update.items():
        if isinstance(value, dict) and key in merged and isinstance(merged[key], dict):
            merged[key] = deep_merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


# --- Primary Configuration Loading Logic for the CLI ---
_CONFIG_CACHE: Optional[Dict[str, Any]] = None
_CONFIG_CACHE_PATH: Optional[Path] = None

def load_settings(config_path: Optional[Path] = None, force_reload: bool = False) -> Dict[str, Any]:
    """
    Loads settings for the CLI application from the TOML config file.
    If the file doesn't exist, it's created with default values.
    """
    global _CONFIG_CACHE, _CONFIG_CACHE_PATH
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    if _CONFIG_CACHE is not None and _CONFIG_CACHE_PATH == path and not force_reload:
        return _CONFIG_CACHE

    loaded_config = copy.deepcopy(DEFAULT_CONFIG_FROM_TOML)

    if not path.exists():
        logger.info(f"CLI Config file not found at {path}. Creating with default values.")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(CONFIG_TOML_CONTENT)
            logger.info(f"Created default CLI config file at {path}")
        except OSError as e:
            logger.error(f"Could not create default CLI config file {path}: {e}. Using internal defaults.")
    else:
        logger.info(f"Attempting to load CLI config from: {path}")
        try:
            with open(path, "rb") as f:
                user_config_from_file = tomllib.load(f)
            loaded_config = deep_merge_dicts(loaded_config, user_config_from_file)
            logger.info(f"Successfully loaded and merged CLI config from {path}")
        except tomllib.TOMLDecodeError as e:
            logger.error(f"Error decoding CLI TOML config file {path}: {e}. Using internal defaults.")
        except OSError as e:
            logger.error(f"Could not read CLI config file {path}: {e}. Using internal defaults.")

    _CONFIG_CACHE = loaded_config
    _CONFIG_CACHE_PATH = path
    logger.debug(f"load_settings returning config with top-level keys: {list(loaded_config.keys())}")
    return _CONFIG_CACHE


# --- CLI Setting Getter ---
def get_cli_setting(section: str, key: str, default: Any = None) -> Any:
    """Helper to get a specific setting from the loaded CLI configuration."""
    config = load_settings(_CONFIG_CACHE_PATH)
    section_data = config.get(section)
    if isinstance(section_data, dict):
        return section_data.get(key, default)
    return default


def load_app_config(config_path: Optional[Path] = None) -> Optional[AppConfig]:
    """Reads the [server] section into an AppConfig. Returns None if the section is invalid."""
    settings = load_settings(config_path)
    server_section = settings.get("server", {})
    try:
        return AppConfig(**server_section)
    except (TypeError, ValidationError) as e:
        logger.error(f"Invalid [server] section in CLI config: {e}")
        return None


def write_app_config(config: AppConfig, config_path: Optional[Path] = None) -> bool:
    """Stores the AppConfig in the [server] section, keeping every other section as it is."""
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    settings = copy.deepcopy(load_settings(path))
    settings["server"] = config.model_dump(mode="json")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            toml.dump(settings, f)
    except OSError as e:
        logger.error(f"Could not write CLI config file {path}: {e}")
        return False
    load_settings(path, force_reload=True)
    logger.info(f"Wrote CLI config to {path}")
    return True


# --- CLI Log File Path Getter ---
def get_cli_log_file_path() -> Path:
    default_log_filename = DEFAULT_CONFIG_FROM_TOML.get("logging", {}).get("log_filename", "freemind_cli.log")
    log_filename = get_cli_setting("logging", "log_filename", default_log_filename)
    log_file_path = BASE_DATA_DIR_CLI / log_filename
    try:
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Could not create log directory {log_file_path.parent}: {e}")
    return log_file_path

#
# End of freemind_cli/config.py
########################################################################################################################
