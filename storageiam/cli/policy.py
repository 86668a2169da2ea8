import logging
from typing import Callable

from storageiam.config.provider import ProviderConfig
from storageiam.iam import (
    STORAGE_BUCKET_IAM_SCHEMA,
    MutexKV,
    Policy,
    ResourceData,
    StorageBucketIamUpdater,
    Timeouts,
    storage_bucket_iam_updater_producer,
    storage_bucket_id_parse_func,
)
from storageiam.iam.resource import DEFAULT_TIMEOUT_SECONDS

log = logging.getLogger(__name__)

mutex_kv = MutexKV()


def bucket_resource(bucket: str, *, create_timeout: float = DEFAULT_TIMEOUT_SECONDS) -> ResourceData:
    return ResourceData(STORAGE_BUCKET_IAM_SCHEMA, {'bucket': bucket}, timeouts=Timeouts(create=create_timeout))


def bucket_updater(config: ProviderConfig, bucket: str, **kwargs) -> StorageBucketIamUpdater:
    return storage_bucket_iam_updater_producer(bucket_resource(bucket, **kwargs), config)


def import_bucket(config: ProviderConfig, identifier: str) -> ResourceData:
    d = ResourceData(STORAGE_BUCKET_IAM_SCHEMA, id=identifier)
    storage_bucket_id_parse_func(d, config)
    return d


async def read_policy(config: ProviderConfig, bucket: str) -> Policy:
    return await bucket_updater(config, bucket).fetch_policy()


async def write_policy(config: ProviderConfig, bucket: str, policy: Policy, **kwargs) -> None:
    u = bucket_updater(config, bucket, **kwargs)
    async with mutex_kv.lock(u.mutex_key()):
        await u.replace_policy(policy)


async def modify_policy(config: ProviderConfig,
                        bucket: str,
                        modify: Callable[[Policy], Policy],
                        **kwargs) -> Policy:
    u = bucket_updater(config, bucket, **kwargs)
    async with mutex_kv.lock(u.mutex_key()):
        policy = await u.fetch_policy()
        modified = modify(policy)
        if modified == policy:
            log.info(f'IAM policy for {u.describe_resource()} is unchanged')
            return policy
        await u.replace_policy(modified)
        return modified
