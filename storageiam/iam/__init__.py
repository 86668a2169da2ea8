from .identifiers import (
    STORAGE_BUCKET_ID_PATTERNS,
    BarePattern,
    IdentifierPattern,
    PrefixedPattern,
    compare_resource_names,
    parse_import_id,
)
from .mutex import MutexKV
from .policy import AuditConfig, AuditLogConfig, Binding, Expr, Policy, add_member, remove_member
from .resource import ResourceData, SchemaField, TimeoutKey, Timeouts
from .storage_bucket import (
    STORAGE_BUCKET_IAM_SCHEMA,
    StorageBucketIamUpdater,
    storage_bucket_diff_suppress,
    storage_bucket_iam_updater_producer,
    storage_bucket_id_parse_func,
)
from .updater import ResourceIamUpdater, ResourceIamUpdaterProducer, ResourceIdParser, generate_user_agent, replace_vars

__all__ = [
    'STORAGE_BUCKET_IAM_SCHEMA',
    'STORAGE_BUCKET_ID_PATTERNS',
    'AuditConfig',
    'AuditLogConfig',
    'BarePattern',
    'Binding',
    'Expr',
    'IdentifierPattern',
    'MutexKV',
    'Policy',
    'PrefixedPattern',
    'ResourceData',
    'ResourceIamUpdater',
    'ResourceIamUpdaterProducer',
    'ResourceIdParser',
    'SchemaField',
    'StorageBucketIamUpdater',
    'TimeoutKey',
    'Timeouts',
    'add_member',
    'compare_resource_names',
    'generate_user_agent',
    'parse_import_id',
    'remove_member',
    'replace_vars',
    'storage_bucket_diff_suppress',
    'storage_bucket_iam_updater_producer',
    'storage_bucket_id_parse_func',
]
