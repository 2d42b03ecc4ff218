import os
from dataclasses import dataclass, field, fields
from os import path
from typing import Any, Dict, Iterable, List, Optional

import yaml
from loguru import logger


class ConfigDataBlankError(Exception):
    """
    Exception raised when config data is blank
    """


class ConfigKeyMissingError(Exception):
    """
    Exception raised when config key is missing error
    """


# Defining config file
CONFIG_FILE = "config.yaml"
CONFIG_FILE_ENV = "PAGE_ACTIONS_CONFIG"
ENV_PREFIX = "PAGE_ACTIONS_"

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def _config_path(config_file: Optional[str] = None) -> str:
    return config_file or os.environ.get(CONFIG_FILE_ENV, CONFIG_FILE)


def load_config(
    config_file: Optional[str] = None,
    known_keys: Iterable[str] = (),
) -> Dict[str, Any]:
    """
    Load the YAML config and apply environment overrides on top of it.

    Every key of the file, and every key in ``known_keys``, can be
    overridden by an environment variable named ``PAGE_ACTIONS_<KEY>``
    (upper case). A missing default config file yields an empty config; a
    missing file that was asked for explicitly raises FileNotFoundError.

    :param config_file: path of the YAML file, defaults to ``config.yaml``
    :param known_keys: keys that may come from the environment only
    :return: config as dictionary
    """
    file_path = _config_path(config_file)
    config: Dict[str, Any] = {}
    if path.exists(file_path):
        with open(file_path, "r", encoding="utf-8") as file:
            config = yaml.safe_load(file) or {}
        logger.debug(f"Configuration loaded from {file_path}")
    elif config_file or CONFIG_FILE_ENV in os.environ:
        raise FileNotFoundError(f"{file_path} config file not found")
    else:
        logger.debug(f"{file_path} not found, using defaults")

    for key in set(config.keys()) | set(known_keys):
        env_value = os.environ.get(f"{ENV_PREFIX}{str(key).upper()}")
        if env_value is not None:
            logger.debug(f'Config "{key}" overridden by environment: {env_value}')
            config[key] = env_value
    return config


def read_config(
    tag: str,
    write_to_console: bool = False,
    raise_error_on_not_found: bool = False,
    validate_existence: bool = False,
    if_none_return: Any = None,
    config_file: Optional[str] = None,
) -> Any:
    """
    Reads the config file and returns the value of the tag
    :param tag: Tag to be read as string
    :param write_to_console: If true, writes the value to console
    :param raise_error_on_not_found: If true, raises an error if the tag is not found
    :param validate_existence: If true, raises an error if the file is not found (Used for checking the file/folder -
        existence) as boolean
    :param if_none_return:  If the tag is not found, returns this value as default
    :param config_file: YAML file to read, defaults to ``config.yaml``
    :return: Value of the tag
    """
    config = load_config(config_file, known_keys=[tag])
    if tag not in config:
        raise ConfigKeyMissingError(f'"{tag}" not found in config file')
    if write_to_console:
        logger.info(f"{tag}: {config[tag]}")
    if raise_error_on_not_found:
        if config[tag] is None:
            raise ConfigDataBlankError(f'"{tag}" is empty in config file')
    if validate_existence:
        if not path.exists(config[tag]):
            raise FileNotFoundError(f'"{config[tag]}" not found')
    if if_none_return is not None:
        if config[tag] is None:
            return if_none_return
    return config[tag]


def get_int(config: Dict[str, Any], key: str, default: int) -> int:
    value = config.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(
            f'Invalid integer config "{key}": {value!r}, using default: {default}'
        )
        return default


def get_float(config: Dict[str, Any], key: str, default: float) -> float:
    value = config.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(
            f'Invalid number config "{key}": {value!r}, using default: {default}'
        )
        return default


def get_bool(config: Dict[str, Any], key: str, default: bool) -> bool:
    value = config.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    logger.warning(
        f'Invalid boolean config "{key}": {value!r}, using default: {default}'
    )
    return default


@dataclass
class FrameworkConfig:
    browser: str = "chrome"
    headless: bool = False
    base_url: Optional[str] = None
    implicit_wait: int = 0
    page_load_timeout: int = 30
    script_timeout: int = 30
    explicit_wait: float = 10
    fluent_wait: float = 30
    poll_interval: float = 0.5
    screenshot_dir: str = "target/screenshots"
    download_dir: Optional[str] = None
    proxy_address: Optional[str] = None
    proxy_port: Optional[str] = None
    arguments: List[str] = field(default_factory=list)


def get_config_data(config_file: Optional[str] = None) -> FrameworkConfig:
    """
    Get the config data from the config file
    :return: config object as FrameworkConfig
    """
    config = load_config(
        config_file, known_keys=[f.name for f in fields(FrameworkConfig)]
    )
    defaults = FrameworkConfig()
    arguments = config.get("arguments") or []
    if isinstance(arguments, str):
        arguments = arguments.split()
    return FrameworkConfig(
        browser=str(config.get("browser") or defaults.browser).lower(),
        headless=get_bool(config, "headless", defaults.headless),
        base_url=config.get("base_url", defaults.base_url),
        implicit_wait=get_int(config, "implicit_wait", defaults.implicit_wait),
        page_load_timeout=get_int(
            config, "page_load_timeout", defaults.page_load_timeout
        ),
        script_timeout=get_int(config, "script_timeout", defaults.script_timeout),
        explicit_wait=get_float(config, "explicit_wait", defaults.explicit_wait),
        fluent_wait=get_float(config, "fluent_wait", defaults.fluent_wait),
        poll_interval=get_float(config, "poll_interval", defaults.poll_interval),
        screenshot_dir=config.get("screenshot_dir") or defaults.screenshot_dir,
        download_dir=config.get("download_dir", defaults.download_dir),
        proxy_address=config.get("proxy_address", defaults.proxy_address),
        proxy_port=config.get("proxy_port", defaults.proxy_port),
        arguments=list(arguments),
    )
