"""Detect which Google Cloud platform the process is running on.

App Engine and Cloud Functions are detected from environment variables;
Compute Engine and Kubernetes Engine with a single metadata-server request
each. Every answer is memoized after the first probe, independently per
platform.
"""

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)

METADATA_HOST = "http://metadata.google.internal"
CLUSTER_NAME_URL = f"{METADATA_HOST}/computeMetadata/v1/instance/attributes/cluster-name"
METADATA_FLAVOR = "Google"


@dataclass(frozen=True)
class EnvironmentFlags:
    """Platform flags; None means the platform has not been probed yet."""

    app_engine: bool | None = None
    cloud_function: bool | None = None
    compute_engine: bool | None = None
    container_engine: bool | None = None


class EnvironmentProber:
    """Memoized platform detection.

    Args:
        http_client: Client used for metadata-server probes.
        env: Environment variables to inspect; defaults to `os.environ`.
    """

    def __init__(self, http_client: httpx.AsyncClient, env: Mapping[str, str] | None = None):
        self._http_client = http_client
        self._env = env if env is not None else os.environ
        self._flags: dict[str, bool] = {}
        self._locks = {name: asyncio.Lock() for name in EnvironmentFlags.__dataclass_fields__}

    @property
    def environment(self) -> EnvironmentFlags:
        """Snapshot of the flags determined so far."""
        return EnvironmentFlags(**self._flags)

    async def _memoized(self, name: str, probe: Callable[[], Awaitable[bool]]) -> bool:
        if name in self._flags:
            return self._flags[name]

        async with self._locks[name]:
            if name not in self._flags:
                self._flags[name] = await probe()
                logger.debug(f"Environment probe {name}: {self._flags[name]}")
            return self._flags[name]

    async def is_app_engine(self) -> bool:
        async def probe() -> bool:
            return bool(self._env.get("GAE_SERVICE") or self._env.get("GAE_MODULE_NAME"))

        return await self._memoized("app_engine", probe)

    async def is_cloud_function(self) -> bool:
        async def probe() -> bool:
            return bool(self._env.get("FUNCTION_NAME"))

        return await self._memoized("cloud_function", probe)

    async def is_compute_engine(self) -> bool:
        async def probe() -> bool:
            try:
                response = await self._http_client.get(METADATA_HOST)
            except httpx.HTTPError as e:
                logger.debug(f"Metadata server unreachable: {e}")
                return False
            return response.headers.get("metadata-flavor") == METADATA_FLAVOR

        return await self._memoized("compute_engine", probe)

    async def is_container_engine(self) -> bool:
        async def probe() -> bool:
            try:
                response = await self._http_client.get(CLUSTER_NAME_URL, headers={"Metadata-Flavor": METADATA_FLAVOR})
            except httpx.HTTPError as e:
                logger.debug(f"Metadata server unreachable: {e}")
                return False
            return response.is_success

        return await self._memoized("container_engine", probe)

    async def get_environment(self) -> EnvironmentFlags:
        """Probe every platform concurrently and return all flags."""
        await asyncio.gather(
            self.is_app_engine(),
            self.is_cloud_function(),
            self.is_compute_engine(),
            self.is_container_engine(),
        )
        return self.environment
