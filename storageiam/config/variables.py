from enum import Enum


class ConfigVariable(str, Enum):
    STORAGE_BASE_PATH = 'storage/base_path'
    IAM_POLICY_VERSION = 'iam/policy_version'
    HTTP_TIMEOUT_IN_SECONDS = 'http/timeout_in_seconds'
    USER_AGENT = 'user_agent'
    CREDENTIALS_FILE = 'credentials_file'
