# Configuration settings should be set in app.config
# The get_config function falls back to the Attachable class attributes and the environment
import os
import logging
from flask import current_app
import attachable
from typing import Any, Optional


def get_config(option: str) -> Optional[Any]:
    """Retrieve a configuration parameter from the app
    :param option: configuration parameter
    :return: configuration value
    """

    try:
        result = current_app.config[option]
    except (KeyError, RuntimeError):
        # not set in the app or no app context
        result = getattr(attachable.Attachable, option, None)
    if result is None:
        result = os.environ.get(option, None)
    return result


def get_bool_config(option: str) -> bool:
    """
    Environment values are strings, "0" and "false" should be falsy
    """
    value = get_config(option)
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false", "no", "off")
    return bool(value)


def is_debug() -> bool:
    """
    We use the loglevel to check whether we're running in debug mode
    :return: whether the app is in debug mode
    :rtype: Boolean
    """
    return attachable.log.getEffectiveLevel() < logging.INFO
