import asyncio
import logging
import time
from types import TracebackType
from typing import Any, Dict, Mapping, Optional, Type, Union

import aiohttp
import orjson

from .credentials import Credentials

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 20


class IamResponseError(aiohttp.ClientResponseError):
    """An error status from the API, with the response body kept for the message."""

    def __init__(self, resp: aiohttp.ClientResponse, body: str):
        super().__init__(resp.request_info, resp.history, status=resp.status, message=resp.reason or '',
                         headers=resp.headers)
        self.body = body

    def __str__(self) -> str:
        return f'{self.status}, message={self.message!r}, url={self.request_info.real_url!r} body={self.body!r}'


class BucketIamClient:
    """Reads and writes bucket IAM policy documents.

    https://cloud.google.com/storage/docs/json_api/v1/buckets/getIamPolicy
    https://cloud.google.com/storage/docs/json_api/v1/buckets/setIamPolicy

    Each call makes exactly one request, except when the server rejects a
    token that has expired in the meantime: then the call is repeated once
    with a fresh token. Error statuses raise `IamResponseError`.
    """

    def __init__(self, credentials: Credentials, *, timeout: Optional[float] = None):
        self._credentials = credentials
        self._timeout = aiohttp.ClientTimeout(total=timeout or DEFAULT_TIMEOUT_SECONDS)
        self._http: Optional[aiohttp.ClientSession] = None

    def _http_session(self) -> aiohttp.ClientSession:
        if self._http is None:
            self._http = aiohttp.ClientSession(timeout=self._timeout)
        return self._http

    async def _request(self,
                       method: str,
                       url: str,
                       *,
                       headers: Mapping[str, str],
                       timeout: Union[float, None] = None,
                       **kwargs) -> aiohttp.ClientResponse:
        if timeout is not None:
            kwargs['timeout'] = aiohttp.ClientTimeout(total=timeout)
        while True:
            auth_headers, expires_at = await self._credentials.auth_headers()
            resp = await self._http_session().request(method, url, headers={**headers, **auth_headers}, **kwargs)
            if resp.status < 400:
                return resp
            body = (await resp.read()).decode(errors='replace')
            resp.release()
            if resp.status == 401 and expires_at is not None and time.time() > expires_at:
                log.info(f'access token expired during {method} {url}, retrying with a new one')
                continue
            raise IamResponseError(resp, body)

    async def get_policy(self, url: str, *, params: Mapping[str, str], headers: Mapping[str, str]) -> Any:
        resp = await self._request('GET', url, params=params, headers=headers)
        try:
            return orjson.loads(await resp.read())
        finally:
            resp.release()

    async def set_policy(self,
                         url: str,
                         policy: Dict[str, Any],
                         *,
                         headers: Mapping[str, str],
                         timeout: Optional[float] = None) -> None:
        # the response echoes the stored policy, nothing reads it
        resp = await self._request(
            'PUT',
            url,
            data=orjson.dumps(policy),
            headers={**headers, 'Content-Type': 'application/json'},
            timeout=timeout,
        )
        resp.release()

    async def close(self) -> None:
        try:
            if self._http is not None:
                await self._http.close()
                self._http = None
                # https://github.com/aio-libs/aiohttp/issues/1925
                await asyncio.sleep(0.250)
        finally:
            await self._credentials.close()

    async def __aenter__(self) -> 'BucketIamClient':
        return self

    async def __aexit__(
        self, exc_type: Optional[Type[BaseException]], exc_val: Optional[BaseException], exc_tb: Optional[TracebackType]
    ) -> None:
        await self.close()
