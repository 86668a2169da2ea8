from .user_config import (
    configuration_of,
    get_storageiam_config_path,
    get_user_config,
    get_user_config_path,
)
from .variables import ConfigVariable

__all__ = [
    'ConfigVariable',
    'configuration_of',
    'get_storageiam_config_path',
    'get_user_config',
    'get_user_config_path',
]
