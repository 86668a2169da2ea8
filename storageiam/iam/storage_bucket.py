import asyncio
import logging
from typing import Dict

import aiohttp
import orjson

from .identifiers import STORAGE_BUCKET_ID_PATTERNS, compare_resource_names, parse_import_id
from .policy import Policy
from .resource import ResourceData, SchemaField, TimeoutKey
from .updater import ResourceIamUpdater, generate_user_agent, replace_vars
from ..config.provider import ProviderConfig
from ..exceptions import FetchError, UpdateError, WriteError

log = logging.getLogger(__name__)


def storage_bucket_diff_suppress(key: str, old: str, new: str, d: ResourceData) -> bool:
    del key, d
    return compare_resource_names(old, new)


STORAGE_BUCKET_IAM_SCHEMA = {
    'bucket': SchemaField(str, required=True, force_new=True, diff_suppress=storage_bucket_diff_suppress),
}


def _set_bucket(d: ResourceData, value: str) -> None:
    try:
        d.set('bucket', value)
    except ValueError as e:
        raise WriteError(f'Error setting bucket: {e}') from e


class StorageBucketIamUpdater(ResourceIamUpdater):
    def __init__(self, bucket: str, d: ResourceData, config: ProviderConfig):
        self._bucket = bucket
        self._d = d
        self._config = config

    async def fetch_policy(self) -> Policy:
        url = self._qualify_bucket_url('iam')
        user_agent = generate_user_agent(self._d, self._config.user_agent)
        log.info(f'retrieving IAM policy for {self.describe_resource()}')
        try:
            data = await self._config.iam_client().get_policy(
                url,
                params={'optionsRequestedPolicyVersion': str(self._config.iam_policy_version)},
                headers={'User-Agent': user_agent},
            )
        except (aiohttp.ClientError, asyncio.TimeoutError, orjson.JSONDecodeError) as e:
            raise FetchError(self.describe_resource(), e) from e
        return Policy.from_json(data)

    async def replace_policy(self, policy: Policy) -> None:
        body = policy.to_json()
        url = self._qualify_bucket_url('iam')
        user_agent = generate_user_agent(self._d, self._config.user_agent)
        log.info(f'setting IAM policy for {self.describe_resource()}')
        try:
            await self._config.iam_client().set_policy(
                url,
                body,
                headers={'User-Agent': user_agent},
                timeout=self._d.timeout(TimeoutKey.CREATE),
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise UpdateError(self.describe_resource(), e) from e

    def _qualify_bucket_url(self, method_identifier: str) -> str:
        return replace_vars(self._d, self._config, f'{{{{StorageBasePath}}}}b/{self._bucket}/{method_identifier}')

    def resource_id(self) -> str:
        return f'b/{self._bucket}'

    def mutex_key(self) -> str:
        return f'iam-storage-bucket-{self.resource_id()}'

    def describe_resource(self) -> str:
        return f'storage bucket "{self.resource_id()}"'


def _resolve(d: ResourceData, config: ProviderConfig, identifier: str) -> StorageBucketIamUpdater:
    values: Dict[str, str] = {}
    bucket, ok = d.get_ok('bucket')
    if ok:
        values['bucket'] = bucket
    values.update(parse_import_id(STORAGE_BUCKET_ID_PATTERNS, identifier))
    u = StorageBucketIamUpdater(values['bucket'], d, config)
    _set_bucket(d, u.resource_id())
    return u


def storage_bucket_iam_updater_producer(d: ResourceData, config: ProviderConfig) -> StorageBucketIamUpdater:
    # We may have gotten either a long or short name, so attempt to parse long name if possible
    return _resolve(d, config, d.get('bucket'))


def storage_bucket_id_parse_func(d: ResourceData, config: ProviderConfig) -> None:
    u = _resolve(d, config, d.id)
    d.set_id(u.resource_id())
