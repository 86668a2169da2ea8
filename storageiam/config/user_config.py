from typing import Optional, Union, TypeVar
import os
import configparser
from pathlib import Path

from .variables import ConfigVariable

T = TypeVar('T')


def xdg_config_home() -> Path:
    value = os.environ.get('XDG_CONFIG_HOME')
    if value is None:
        return Path(Path.home(), ".config")
    return Path(value)


def get_storageiam_config_path(*, _config_dir: Optional[str] = None) -> Path:
    return Path(_config_dir or xdg_config_home(), 'storageiam')


def get_user_config_path(*, _config_dir: Optional[str] = None) -> Path:
    return Path(get_storageiam_config_path(_config_dir=_config_dir), 'config.ini')


def get_user_config() -> configparser.ConfigParser:
    user_config = configparser.ConfigParser()
    user_config.read(get_user_config_path())
    return user_config


def section_and_option(config_variable: ConfigVariable):
    if '/' in config_variable.value:
        section, option = config_variable.value.split('/')
    else:
        section = 'global'
        option = config_variable.value
    return section, option


def unchecked_configuration_of(section: str,
                               option: str,
                               explicit_argument: Optional[T],
                               fallback: T) -> Union[str, T]:
    if explicit_argument is not None:
        return explicit_argument

    envvar = 'STORAGEIAM_' + section.upper() + '_' + option.upper()
    envval = os.environ.get(envvar, None)
    if envval is not None:
        return envval

    from_user_config = get_user_config().get(section, option, fallback=None)
    if from_user_config is not None:
        return from_user_config

    return fallback


def configuration_of(config_variable: ConfigVariable,
                     explicit_argument: Optional[T],
                     fallback: T) -> Union[str, T]:
    section, option = section_and_option(config_variable)
    return unchecked_configuration_of(section, option, explicit_argument, fallback)
