import asyncio
import os
from typing import Any, Dict, List, Optional

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from storageiam.google import AnonymousCredentials
from storageiam.config.provider import ProviderConfig


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv('XDG_CONFIG_HOME', str(tmp_path))
    for var in list(os.environ):
        if var.startswith('STORAGEIAM_'):
            monkeypatch.delenv(var)
    yield tmp_path


class FakeStorage:
    """Just enough of the Cloud Storage bucket IAM API."""

    def __init__(self):
        self.policies: Dict[str, Dict[str, Any]] = {}
        self.requests: List[Dict[str, Any]] = []
        self.errors: Dict[str, int] = {}
        self.delays: Dict[str, float] = {}
        self.base_path: Optional[str] = None
        self.json_get_response = True
        self.json_put_response = True
        self.put_response_text: Optional[str] = None

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_get('/storage/v1/b/{bucket}/iam', self.get_iam_policy)
        app.router.add_put('/storage/v1/b/{bucket}/iam', self.set_iam_policy)
        return app

    async def _record(self, request: web.Request) -> Optional[web.Response]:
        body = await request.json() if request.can_read_body else None
        self.requests.append({
            'method': request.method,
            'path': request.path,
            'query': dict(request.query),
            'headers': dict(request.headers),
            'body': body,
        })
        if request.method in self.delays:
            await asyncio.sleep(self.delays[request.method])
        status = self.errors.get(request.method)
        if status is not None:
            return web.json_response(
                {'error': {'code': status, 'message': 'caller does not have storage.buckets.getIamPolicy access'}},
                status=status,
            )
        return None

    async def get_iam_policy(self, request: web.Request) -> web.Response:
        error = await self._record(request)
        if error is not None:
            return error
        bucket = request.match_info['bucket']
        policy = self.policies.get(bucket, {'version': 1, 'etag': 'CAE=', 'bindings': []})
        if not self.json_get_response:
            return web.Response(status=200, text='<html>maintenance</html>', content_type='text/html')
        return web.json_response({'kind': 'storage#policy', 'resourceId': f'projects/_/buckets/{bucket}', **policy})

    async def set_iam_policy(self, request: web.Request) -> web.Response:
        error = await self._record(request)
        if error is not None:
            return error
        bucket = request.match_info['bucket']
        policy = {**self.requests[-1]['body'], 'etag': 'CAI='}
        self.policies[bucket] = policy
        if not self.json_put_response:
            return web.Response(status=200, text=self.put_response_text)
        return web.json_response({'kind': 'storage#policy', 'resourceId': f'projects/_/buckets/{bucket}', **policy})


@pytest.fixture
async def fake_storage():
    fake = FakeStorage()
    server = TestServer(fake.app())
    await server.start_server()
    fake.base_path = str(server.make_url('/storage/v1/'))
    try:
        yield fake
    finally:
        await server.close()


@pytest.fixture
async def provider_config(fake_storage):
    async with ProviderConfig(
        storage_base_path=fake_storage.base_path,
        credentials=AnonymousCredentials(),
    ) as config:
        yield config
