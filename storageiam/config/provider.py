from types import TracebackType
from typing import Dict, Optional, Type

import storageiam

from .user_config import configuration_of
from .variables import ConfigVariable
from ..google import BucketIamClient, Credentials, resolve_credentials

DEFAULT_STORAGE_BASE_PATH = 'https://storage.googleapis.com/storage/v1/'
# Policy schema version 3 is the first to return conditional role bindings.
DEFAULT_IAM_POLICY_VERSION = 3


def default_user_agent() -> str:
    return f'storageiam/{storageiam.__version__}'


class ProviderConfig:
    """Settings and clients shared by every IAM resource in one run.

    Owns the IAM client, which is created on first use. Close the
    configuration (or use it as an async context manager) to release the
    underlying HTTP session and credentials.
    """

    def __init__(self,
                 *,
                 storage_base_path: str = DEFAULT_STORAGE_BASE_PATH,
                 iam_policy_version: int = DEFAULT_IAM_POLICY_VERSION,
                 user_agent: Optional[str] = None,
                 credentials: Optional[Credentials] = None,
                 credentials_file: Optional[str] = None,
                 http_timeout: Optional[float] = None):
        if credentials is not None and credentials_file is not None:
            raise ValueError('Do not provide credentials_file and credentials.')
        if not storage_base_path.endswith('/'):
            storage_base_path += '/'
        self.storage_base_path = storage_base_path
        self.iam_policy_version = iam_policy_version
        self.user_agent = user_agent or default_user_agent()
        self.http_timeout = http_timeout
        self._credentials = credentials
        self._credentials_file = credentials_file
        self._iam_client: Optional[BucketIamClient] = None

    @staticmethod
    def from_user_config(*,
                         storage_base_path: Optional[str] = None,
                         iam_policy_version: Optional[int] = None,
                         user_agent: Optional[str] = None,
                         credentials: Optional[Credentials] = None,
                         credentials_file: Optional[str] = None,
                         http_timeout: Optional[float] = None) -> 'ProviderConfig':
        version = configuration_of(ConfigVariable.IAM_POLICY_VERSION, iam_policy_version, DEFAULT_IAM_POLICY_VERSION)
        try:
            version = int(version)
        except ValueError as e:
            raise ValueError(f'iam/policy_version must be an integer, found: {version!r}') from e

        timeout = configuration_of(ConfigVariable.HTTP_TIMEOUT_IN_SECONDS, http_timeout, None)
        if timeout is not None:
            timeout = float(timeout)

        if credentials is None:
            credentials_file = configuration_of(ConfigVariable.CREDENTIALS_FILE, credentials_file, None)

        return ProviderConfig(
            storage_base_path=configuration_of(ConfigVariable.STORAGE_BASE_PATH, storage_base_path, DEFAULT_STORAGE_BASE_PATH),
            iam_policy_version=version,
            user_agent=configuration_of(ConfigVariable.USER_AGENT, user_agent, None),
            credentials=credentials,
            credentials_file=credentials_file,
            http_timeout=timeout,
        )

    def base_paths(self) -> Dict[str, str]:
        return {'StorageBasePath': self.storage_base_path}

    def iam_client(self) -> BucketIamClient:
        if self._iam_client is None:
            self._iam_client = BucketIamClient(
                resolve_credentials(self._credentials, self._credentials_file),
                timeout=self.http_timeout,
            )
        return self._iam_client

    async def close(self) -> None:
        if self._iam_client is not None:
            await self._iam_client.close()
            self._iam_client = None

    async def __aenter__(self) -> 'ProviderConfig':
        return self

    async def __aexit__(
        self, exc_type: Optional[Type[BaseException]], exc_val: Optional[BaseException], exc_tb: Optional[TracebackType]
    ) -> None:
        await self.close()
