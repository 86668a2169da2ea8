"""Access tokens for the Cloud Storage JSON API.

Credentials come from, in order: an explicit key file, the file named by
GOOGLE_APPLICATION_CREDENTIALS, the gcloud application default credentials
file, and the GCE metadata server. Without any of those, requests are sent
unauthenticated.
"""
import abc
import json
import logging
import os
import socket
import time
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

import aiohttp
import jwt
import orjson

from ..utils import first_extant_file

log = logging.getLogger(__name__)

TOKEN_URL = 'https://www.googleapis.com/oauth2/v4/token'
METADATA_TOKEN_URL = 'http://metadata.google.internal/computeMetadata/v1/instance/service-accounts/default/token'

STORAGE_SCOPES = [
    'https://www.googleapis.com/auth/devstorage.full_control',
    'https://www.googleapis.com/auth/cloud-platform',
]


class Credentials(abc.ABC):
    @abc.abstractmethod
    async def auth_headers(self) -> Tuple[Dict[str, str], Optional[float]]:
        """Headers to authenticate a request and the Unix time they stop being valid.

        An expiration of None means the headers never expire."""
        raise NotImplementedError

    async def close(self) -> None:
        pass


class AnonymousCredentials(Credentials):
    async def auth_headers(self) -> Tuple[Dict[str, str], Optional[float]]:
        return {}, None

    def __str__(self):
        return 'AnonymousCredentials'


class AccessToken:
    def __init__(self, token: str, expires_at: float):
        self.token = token
        self.expires_at = expires_at

    @staticmethod
    def from_token_response(data: Dict[str, Any]) -> 'AccessToken':
        # refreshed after half of its lifetime
        return AccessToken(data['access_token'], time.time() + data['expires_in'] // 2)

    def expired(self) -> bool:
        return self.expires_at <= time.time()


class GoogleCredentials(Credentials):
    """Bearer token credentials that cache the token until it expires."""

    def __init__(self, *, scopes: Optional[List[str]] = None):
        self.scopes = scopes or STORAGE_SCOPES
        self._token: Optional[AccessToken] = None
        self._http: Optional[aiohttp.ClientSession] = None

    def _http_session(self) -> aiohttp.ClientSession:
        # created on first use so that it binds to the running loop
        if self._http is None:
            self._http = aiohttp.ClientSession(raise_for_status=True, timeout=aiohttp.ClientTimeout(total=20))
        return self._http

    async def _request_token(self, method: str, url: str, **kwargs) -> AccessToken:
        async with self._http_session().request(method, url, **kwargs) as resp:
            return AccessToken.from_token_response(orjson.loads(await resp.read()))

    @abc.abstractmethod
    async def _fetch_token(self) -> AccessToken:
        raise NotImplementedError

    async def auth_headers(self) -> Tuple[Dict[str, str], Optional[float]]:
        if self._token is None or self._token.expired():
            log.info(f'fetching access token with {self}')
            self._token = await self._fetch_token()
        return {'Authorization': f'Bearer {self._token.token}'}, self._token.expires_at

    async def close(self) -> None:
        if self._http is not None:
            await self._http.close()
            self._http = None


# https://developers.google.com/identity/protocols/oauth2/web-server#offline
class AuthorizedUserCredentials(GoogleCredentials):
    def __init__(self, key: Dict[str, str], **kwargs):
        super().__init__(**kwargs)
        self.key = key

    def __str__(self):
        return 'AuthorizedUserCredentials'

    async def _fetch_token(self) -> AccessToken:
        return await self._request_token(
            'POST',
            TOKEN_URL,
            headers={'content-type': 'application/x-www-form-urlencoded'},
            data=urlencode({
                'grant_type': 'refresh_token',
                'client_id': self.key['client_id'],
                'client_secret': self.key['client_secret'],
                'refresh_token': self.key['refresh_token'],
            }),
        )


# https://developers.google.com/identity/protocols/oauth2/service-account
class ServiceAccountCredentials(GoogleCredentials):
    def __init__(self, key: Dict[str, str], **kwargs):
        super().__init__(**kwargs)
        self.key = key

    def __str__(self):
        return f'ServiceAccountCredentials for {self.key["client_email"]}'

    def assertion(self) -> str:
        now = int(time.time())
        claims = {
            'iss': self.key['client_email'],
            'aud': TOKEN_URL,
            'scope': ' '.join(self.scopes),
            'iat': now,
            'exp': now + 300,
        }
        return jwt.encode(claims, self.key['private_key'], algorithm='RS256')

    async def _fetch_token(self) -> AccessToken:
        return await self._request_token(
            'POST',
            TOKEN_URL,
            headers={'content-type': 'application/x-www-form-urlencoded'},
            data=urlencode({
                'grant_type': 'urn:ietf:params:oauth:grant-type:jwt-bearer',
                'assertion': self.assertion(),
            }),
        )


# https://cloud.google.com/compute/docs/access/create-enable-service-accounts-for-instances#applications
class MetadataServerCredentials(GoogleCredentials):
    def __str__(self):
        return 'MetadataServerCredentials'

    async def _fetch_token(self) -> AccessToken:
        return await self._request_token('GET', METADATA_TOKEN_URL, headers={'Metadata-Flavor': 'Google'})

    @staticmethod
    def available() -> bool:
        try:
            socket.getaddrinfo('metadata.google.internal', 80)
        except socket.gaierror:
            return False
        return True


def credentials_from_key(key: Dict[str, Any], *, scopes: Optional[List[str]] = None) -> GoogleCredentials:
    key_type = key.get('type')
    if key_type == 'service_account':
        return ServiceAccountCredentials(key, scopes=scopes)
    if key_type == 'authorized_user':
        return AuthorizedUserCredentials(key, scopes=scopes)
    raise ValueError(f'unsupported Google credentials type {key_type!r}')


def credentials_from_file(path: str, *, scopes: Optional[List[str]] = None) -> GoogleCredentials:
    with open(path, encoding='utf-8') as f:
        return credentials_from_key(json.load(f), scopes=scopes)


def default_credentials() -> Credentials:
    path = first_extant_file(
        os.environ.get('GOOGLE_APPLICATION_CREDENTIALS'),
        os.path.expanduser('~/.config/gcloud/application_default_credentials.json'),
    )
    if path is not None:
        credentials = credentials_from_file(path)
        log.info(f'using credentials file {path}: {credentials}')
        return credentials

    if MetadataServerCredentials.available():
        log.info('no credentials file found, using the metadata server')
        return MetadataServerCredentials()

    log.warning('no Google credentials found, sending unauthenticated requests. '
                'Run `gcloud auth application-default login` or set GOOGLE_APPLICATION_CREDENTIALS.')
    return AnonymousCredentials()


def resolve_credentials(credentials: Optional[Credentials], credentials_file: Optional[str]) -> Credentials:
    if credentials is not None:
        if credentials_file is not None:
            raise ValueError('Do not provide credentials_file and credentials.')
        return credentials
    if credentials_file:
        return credentials_from_file(credentials_file)
    return default_credentials()
