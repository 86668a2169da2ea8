from collections import namedtuple
import os
import re

from storageiam.config import ConfigVariable

ConfigVariableInfo = namedtuple('ConfigVariableInfo', ['help_msg', 'validation'])

_config_variables = {
    ConfigVariable.STORAGE_BASE_PATH: ConfigVariableInfo(
        help_msg='Base URL of the Cloud Storage JSON API',
        validation=(lambda x: re.fullmatch(r'https?://\S+', x) is not None, 'should be an http(s) URL'),
    ),
    ConfigVariable.IAM_POLICY_VERSION: ConfigVariableInfo(
        help_msg='IAM policy schema version requested when reading policies',
        validation=(lambda x: x in ('1', '3'), 'should be 1 or 3'),
    ),
    ConfigVariable.HTTP_TIMEOUT_IN_SECONDS: ConfigVariableInfo(
        help_msg='Default timeout for HTTP requests, in seconds',
        validation=(lambda x: re.fullmatch(r'[0-9]+(\.[0-9]*)?', x) is not None, 'should be a number of seconds'),
    ),
    ConfigVariable.USER_AGENT: ConfigVariableInfo(
        help_msg='User-Agent sent with every API request',
        validation=(lambda x: bool(x.strip()), 'should not be empty'),
    ),
    ConfigVariable.CREDENTIALS_FILE: ConfigVariableInfo(
        help_msg='Google service account or authorized user credentials file',
        validation=(os.path.isfile, 'should be an existing file'),
    ),
}


def config_variables():
    return _config_variables
