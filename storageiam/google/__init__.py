from .credentials import (
    AccessToken,
    AnonymousCredentials,
    AuthorizedUserCredentials,
    Credentials,
    GoogleCredentials,
    MetadataServerCredentials,
    ServiceAccountCredentials,
    credentials_from_file,
    credentials_from_key,
    default_credentials,
    resolve_credentials,
)
from .iam_client import BucketIamClient, IamResponseError

__all__ = [
    'AccessToken',
    'AnonymousCredentials',
    'AuthorizedUserCredentials',
    'BucketIamClient',
    'Credentials',
    'GoogleCredentials',
    'IamResponseError',
    'MetadataServerCredentials',
    'ServiceAccountCredentials',
    'credentials_from_file',
    'credentials_from_key',
    'default_credentials',
    'resolve_credentials',
]
