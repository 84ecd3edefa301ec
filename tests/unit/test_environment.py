"""Tests for platform detection."""

import httpx
import pytest

from google_auto_auth.environment import CLUSTER_NAME_URL, EnvironmentFlags, EnvironmentProber


def metadata_client(*, flavor: str | None = "Google", cluster_status: int = 200, calls: list | None = None):
    """Client whose metadata server answers like Compute Engine (or not)."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(str(request.url))
        if str(request.url) == CLUSTER_NAME_URL:
            return httpx.Response(cluster_status, text="my-cluster")
        headers = {"Metadata-Flavor": flavor} if flavor else {}
        return httpx.Response(200, headers=headers)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def unreachable_client():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Name or service not known", request=request)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestEnvironmentVariables:
    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["GAE_SERVICE", "GAE_MODULE_NAME"])
    async def test_app_engine(self, name):
        prober = EnvironmentProber(metadata_client(), env={name: "default"})
        assert await prober.is_app_engine() is True

    @pytest.mark.unit
    async def test_not_app_engine(self):
        prober = EnvironmentProber(metadata_client(), env={})
        assert await prober.is_app_engine() is False

    @pytest.mark.unit
    async def test_cloud_function(self):
        prober = EnvironmentProber(metadata_client(), env={"FUNCTION_NAME": "handler"})
        assert await prober.is_cloud_function() is True

    @pytest.mark.unit
    async def test_not_cloud_function(self):
        prober = EnvironmentProber(metadata_client(), env={})
        assert await prober.is_cloud_function() is False

    @pytest.mark.unit
    async def test_flag_memoized(self):
        """The environment is read once; later changes are not observed."""
        env = {"FUNCTION_NAME": "handler"}
        prober = EnvironmentProber(metadata_client(), env=env)

        assert await prober.is_cloud_function() is True
        del env["FUNCTION_NAME"]
        assert await prober.is_cloud_function() is True

    @pytest.mark.unit
    async def test_defaults_to_process_environment(self, monkeypatch):
        monkeypatch.setenv("GAE_SERVICE", "default")
        prober = EnvironmentProber(metadata_client())

        assert await prober.is_app_engine() is True


class TestMetadataProbes:
    @pytest.mark.unit
    async def test_compute_engine(self):
        prober = EnvironmentProber(metadata_client(), env={})
        assert await prober.is_compute_engine() is True

    @pytest.mark.unit
    async def test_not_compute_engine_without_flavor_header(self):
        prober = EnvironmentProber(metadata_client(flavor=None), env={})
        assert await prober.is_compute_engine() is False

    @pytest.mark.unit
    async def test_not_compute_engine_when_unreachable(self):
        prober = EnvironmentProber(unreachable_client(), env={})
        assert await prober.is_compute_engine() is False

    @pytest.mark.unit
    async def test_container_engine(self):
        prober = EnvironmentProber(metadata_client(), env={})
        assert await prober.is_container_engine() is True

    @pytest.mark.unit
    async def test_not_container_engine_without_cluster(self):
        prober = EnvironmentProber(metadata_client(cluster_status=404), env={})
        assert await prober.is_container_engine() is False

    @pytest.mark.unit
    async def test_not_container_engine_when_unreachable(self):
        prober = EnvironmentProber(unreachable_client(), env={})
        assert await prober.is_container_engine() is False

    @pytest.mark.unit
    async def test_check_runs_once(self):
        calls = []
        prober = EnvironmentProber(metadata_client(calls=calls), env={})

        await prober.is_compute_engine()
        await prober.is_compute_engine()

        assert len(calls) == 1


class TestGetEnvironment:
    def test_unchecked(self):
        prober = EnvironmentProber(metadata_client(), env={})
        assert prober.environment == EnvironmentFlags()

    @pytest.mark.unit
    async def test_all_flags(self):
        prober = EnvironmentProber(metadata_client(), env={"GAE_SERVICE": "default"})

        flags = await prober.get_environment()

        assert flags == EnvironmentFlags(
            app_engine=True,
            cloud_function=False,
            compute_engine=True,
            container_engine=True,
        )
        assert prober.environment == flags

    @pytest.mark.unit
    async def test_partial_snapshot(self):
        prober = EnvironmentProber(metadata_client(), env={})

        await prober.is_app_engine()

        assert prober.environment == EnvironmentFlags(app_engine=False)
