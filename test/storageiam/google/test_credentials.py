import json
import time

import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from storageiam.google import (
    AccessToken,
    AnonymousCredentials,
    AuthorizedUserCredentials,
    GoogleCredentials,
    ServiceAccountCredentials,
    credentials_from_file,
    credentials_from_key,
    default_credentials,
    resolve_credentials,
)
from storageiam.google.credentials import TOKEN_URL, MetadataServerCredentials


@pytest.fixture
def private_key():
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    return key, pem


@pytest.fixture
def key_file(tmp_path, private_key):
    _, pem = private_key
    path = tmp_path / 'key.json'
    path.write_text(json.dumps({
        'type': 'service_account',
        'client_email': 'ci@project.iam.gserviceaccount.com',
        'private_key': pem,
    }))
    return str(path)


def test_access_token():
    token = AccessToken.from_token_response({'access_token': 'abc', 'expires_in': 3600})
    assert token.token == 'abc'
    assert not token.expired()
    assert AccessToken('abc', time.time() - 1).expired()


def test_credentials_from_key():
    creds = credentials_from_key(
        {'type': 'authorized_user', 'client_id': 'id', 'client_secret': 'secret', 'refresh_token': 'r'}
    )
    assert isinstance(creds, AuthorizedUserCredentials)
    with pytest.raises(ValueError):
        credentials_from_key({'type': 'external_account'})


def test_credentials_from_file(key_file):
    creds = credentials_from_file(key_file)
    assert isinstance(creds, ServiceAccountCredentials)
    assert str(creds) == 'ServiceAccountCredentials for ci@project.iam.gserviceaccount.com'


def test_resolve_credentials(key_file):
    anonymous = AnonymousCredentials()
    assert resolve_credentials(anonymous, None) is anonymous
    assert isinstance(resolve_credentials(None, key_file), ServiceAccountCredentials)
    with pytest.raises(ValueError):
        resolve_credentials(anonymous, key_file)


def test_default_credentials_from_environment(monkeypatch, key_file):
    monkeypatch.setenv('GOOGLE_APPLICATION_CREDENTIALS', key_file)
    assert isinstance(default_credentials(), ServiceAccountCredentials)


def test_default_credentials_fall_back_to_anonymous(monkeypatch, tmp_path):
    monkeypatch.delenv('GOOGLE_APPLICATION_CREDENTIALS', raising=False)
    monkeypatch.setenv('HOME', str(tmp_path))
    monkeypatch.setattr(MetadataServerCredentials, 'available', staticmethod(lambda: False))
    assert isinstance(default_credentials(), AnonymousCredentials)


def test_service_account_assertion(private_key):
    key, pem = private_key
    creds = ServiceAccountCredentials({'client_email': 'ci@project.iam.gserviceaccount.com', 'private_key': pem})
    claims = jwt.decode(creds.assertion(), key.public_key(), algorithms=['RS256'], audience=TOKEN_URL)
    assert claims['iss'] == 'ci@project.iam.gserviceaccount.com'
    assert 'https://www.googleapis.com/auth/devstorage.full_control' in claims['scope'].split(' ')
    assert claims['exp'] - claims['iat'] == 300


class CountingCredentials(GoogleCredentials):
    def __init__(self):
        super().__init__()
        self.fetches = 0

    async def _fetch_token(self):
        self.fetches += 1
        return AccessToken.from_token_response({'access_token': f'token-{self.fetches}', 'expires_in': 3600})


@pytest.mark.asyncio
async def test_access_token_is_cached():
    creds = CountingCredentials()
    headers, expires_at = await creds.auth_headers()
    assert headers == {'Authorization': 'Bearer token-1'}
    assert expires_at is not None and expires_at > time.time()
    assert (await creds.auth_headers())[0] == {'Authorization': 'Bearer token-1'}
    assert creds.fetches == 1
    await creds.close()
