"""
    config_parsing.py

    Summary:
        Contains functionality for reading YAML configuration files and
        converting configuration dictionaries into dataclasses.
"""
import dataclasses
from pathlib import Path
from typing import Any, Type, TypeVar

import maneuvering_simulator.common.file_utils as fu
import numpy as np
from maneuvering_simulator.common.exceptions import InvalidConfigurationError

T = TypeVar("T")


def check_keys(dataclass_type: Type[Any], config_dict: dict) -> None:
    """Checks that all keys in config_dict are fields of dataclass_type.

    Args:
        dataclass_type (Type[Any]): Dataclass type to check against.
        config_dict (dict): Configuration dictionary.

    Raises:
        InvalidConfigurationError: On unknown keys.
    """
    valid_keys = {f.name for f in dataclasses.fields(dataclass_type)}
    unknown_keys = set(config_dict.keys()) - valid_keys
    if unknown_keys:
        raise InvalidConfigurationError(
            f"Unknown configuration key(s) {sorted(unknown_keys)} for {dataclass_type.__name__}. Valid keys: {sorted(valid_keys)}."
        )


def check_number(name: str, value: Any) -> float:
    """Checks that a configuration value is a real number, booleans excluded.

    Args:
        name (str): Name of the setting, used in the error message.
        value (Any): Value to check.

    Raises:
        InvalidConfigurationError: If the value is not a number.

    Returns:
        float: The value as a float.
    """
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise InvalidConfigurationError(f"Setting '{name}' must be a number, got {value!r} of type {type(value).__name__}.")
    return float(value)


def convert_settings_dict_to_dataclass(dataclass_type: Type[T], config_dict: dict) -> T:
    """Converts a flat settings dictionary into the given dataclass type.

    Args:
        dataclass_type (Type[T]): Dataclass type.
        config_dict (dict): Settings dictionary with keys equal to the dataclass fields.

    Returns:
        T: Dataclass instance.
    """
    if config_dict is None:
        return dataclass_type()
    if not isinstance(config_dict, dict):
        raise InvalidConfigurationError(f"Settings for {dataclass_type.__name__} should be a dictionary, got {type(config_dict).__name__}.")
    check_keys(dataclass_type, config_dict)
    return dataclass_type(**config_dict)


def extract(dataclass_type: Type[T], config_file: Path, **kwargs) -> T:
    """Reads the configuration file, overrides the settings with kwargs and builds the dataclass through its from_dict method.

    Args:
        dataclass_type (Type[T]): Configuration dataclass type, must implement from_dict.
        config_file (Path): Path to the YAML configuration file.
        kwargs: Top level settings to override.

    Returns:
        T: Configuration object.
    """
    config_file = Path(config_file)
    if not config_file.is_file():
        raise InvalidConfigurationError(f"Configuration file {config_file} does not exist.")

    config_dict = fu.read_yaml_into_dict(config_file)
    if config_dict is None:
        config_dict = {}
    if not isinstance(config_dict, dict):
        raise InvalidConfigurationError(f"Configuration file {config_file} must contain a mapping at the top level.")

    for key, value in kwargs.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(config_dict.get(key), dict):
            config_dict[key] = {**config_dict[key], **value}
        else:
            config_dict[key] = value

    return dataclass_type.from_dict(config_dict)
