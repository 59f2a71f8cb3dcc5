"""Provisioning of the backing services: ingestion, visualization and render worker."""

import asyncio
import time
from enum import Enum
from typing import Protocol

import httpx
from testcontainers.core.container import DockerContainer
from testcontainers.core.network import Network

from ..config import RESOURCES_DIR, Settings
from ..errors import ProvisioningError
from ..logging_config import get_logger

logger = get_logger(__name__)

INGEST_PORT = 8080
GRAFANA_PORT = 3000
RENDERER_PORT = 8081


class Service(str, Enum):
    """Backing services the pipeline talks to."""

    INGEST = "jfr-datasource"
    GRAFANA = "grafana"
    RENDERER = "grafana-image-renderer"


HEALTH_PATHS = {
    Service.INGEST: "/",
    Service.GRAFANA: "/api/health",
    Service.RENDERER: "/",
}


class IEnvironmentProvisioner(Protocol):
    """Start, address and tear down the backing services."""

    async def start(self) -> None:
        """Bring every service up and wait until it responds."""
        ...

    async def stop(self) -> None:
        """Tear every service down. Safe to call more than once."""
        ...

    def endpoint(self, service: Service) -> str:
        """Base URL of a running service."""
        ...


async def wait_until_ready(
    url: str,
    timeout: float,
    interval: float = 1.0,
    client: httpx.AsyncClient | None = None,
) -> None:
    """
    Poll url until the service answers without a server error.

    Raises:
        ProvisioningError: the service did not answer within timeout seconds.
    """
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=httpx.Timeout(5.0))

    deadline = time.monotonic() + timeout
    last_error: str = "no attempt made"
    try:
        while True:
            try:
                response = await client.get(url)
                if not response.is_server_error:
                    logger.debug("%s ready (status %d)", url, response.status_code)
                    return
                last_error = f"status {response.status_code}"
            except httpx.HTTPError as e:
                last_error = str(e) or type(e).__name__

            if time.monotonic() >= deadline:
                raise ProvisioningError(f"{url} not ready after {timeout:.0f}s: {last_error}")
            await asyncio.sleep(interval)
    finally:
        if owns_client:
            await client.aclose()


class ContainerProvisioner:
    """Runs the three services as Docker containers on a private network."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._network: Network | None = None
        self._containers: dict[Service, DockerContainer] = {}
        self._endpoints: dict[Service, str] = {}
        self._stopped = False

    def _build_containers(self, network: Network) -> dict[Service, DockerContainer]:
        datasource = (
            DockerContainer(self._settings.jfr_datasource_image)
            .with_exposed_ports(INGEST_PORT)
            .with_network(network)
            .with_network_aliases(Service.INGEST.value)
        )
        renderer = (
            DockerContainer(self._settings.renderer_image)
            .with_exposed_ports(RENDERER_PORT)
            .with_network(network)
            .with_network_aliases(Service.RENDERER.value)
        )
        grafana = (
            DockerContainer(self._settings.grafana_image)
            .with_exposed_ports(GRAFANA_PORT)
            .with_network(network)
            .with_network_aliases(Service.GRAFANA.value)
            .with_env("GF_INSTALL_PLUGINS", "grafana-simple-json-datasource")
            .with_env(
                "GF_RENDERING_SERVER_URL",
                f"http://{Service.RENDERER.value}:{RENDERER_PORT}/render",
            )
            .with_env("GF_RENDERING_CALLBACK_URL", f"http://{Service.GRAFANA.value}:{GRAFANA_PORT}")
            .with_env("GF_LOG_FILTERS", "rendering:debug")
            .with_env("GF_SECURITY_ADMIN_USER", self._settings.grafana_user)
            .with_env("GF_SECURITY_ADMIN_PASSWORD", self._settings.grafana_password)
            .with_volume_mapping(
                str(RESOURCES_DIR / "provisioning"), "/etc/grafana/provisioning", "ro"
            )
            .with_volume_mapping(
                str(RESOURCES_DIR / "dashboards"), "/var/lib/grafana/dashboards", "ro"
            )
        )
        # Start order: the visualization service comes up last
        return {
            Service.INGEST: datasource,
            Service.RENDERER: renderer,
            Service.GRAFANA: grafana,
        }

    def _start_containers(self) -> None:
        network = Network()
        network.create()
        self._network = network
        logger.debug("network %s", network.name)

        ports = {
            Service.INGEST: INGEST_PORT,
            Service.RENDERER: RENDERER_PORT,
            Service.GRAFANA: GRAFANA_PORT,
        }
        for service, container in self._build_containers(network).items():
            logger.info("Starting %s", service.value)
            container.start()
            self._containers[service] = container
            host = container.get_container_host_ip()
            port = container.get_exposed_port(ports[service])
            self._endpoints[service] = f"http://{host}:{port}"

    async def start(self) -> None:
        """Start the containers, then wait until each service responds."""
        try:
            await asyncio.to_thread(self._start_containers)
        except Exception as e:
            raise ProvisioningError(f"failed to start containers: {e}") from e

        for service in self._containers:
            await wait_until_ready(
                self._endpoints[service] + HEALTH_PATHS[service],
                timeout=self._settings.startup_timeout,
            )
        logger.info("Environment ready: %s", self._endpoints)

    def _stop_containers(self) -> list[str]:
        errors: list[str] = []
        for service, container in reversed(list(self._containers.items())):
            try:
                container.stop()
            except Exception as e:
                errors.append(f"{service.value}: {e}")
        if self._network is not None:
            try:
                self._network.remove()
            except Exception as e:
                errors.append(f"network: {e}")
        return errors

    async def stop(self) -> None:
        """Stop every started container and remove the network."""
        if self._stopped:
            return
        self._stopped = True

        errors = await asyncio.to_thread(self._stop_containers)
        self._containers.clear()
        self._network = None
        if errors:
            raise ProvisioningError("teardown incomplete: " + "; ".join(errors))
        logger.info("Environment stopped")

    def endpoint(self, service: Service) -> str:
        """Mapped base URL of a started container."""
        try:
            return self._endpoints[service]
        except KeyError:
            raise ProvisioningError(f"{service.value} is not running") from None


class StaticProvisioner:
    """Services that are already running at configured URLs."""

    def __init__(self, endpoints: dict[Service, str], startup_timeout: float = 180.0):
        self._endpoints = {service: url.rstrip("/") for service, url in endpoints.items()}
        self._startup_timeout = startup_timeout

    async def start(self) -> None:
        """Wait until every configured service responds."""
        for service, url in self._endpoints.items():
            await wait_until_ready(url + HEALTH_PATHS[service], timeout=self._startup_timeout)
        logger.info("Using running services: %s", self._endpoints)

    async def stop(self) -> None:
        """Nothing to tear down; the services outlive the run."""
        return

    def endpoint(self, service: Service) -> str:
        try:
            return self._endpoints[service]
        except KeyError:
            raise ProvisioningError(f"no URL configured for {service.value}") from None


def create_provisioner(settings: Settings) -> IEnvironmentProvisioner:
    """Use running services when their URLs are configured, containers otherwise."""
    if settings.grafana_url and settings.jfr_datasource_url:
        endpoints = {
            Service.INGEST: settings.jfr_datasource_url,
            Service.GRAFANA: settings.grafana_url,
        }
        if settings.renderer_url:
            endpoints[Service.RENDERER] = settings.renderer_url
        return StaticProvisioner(endpoints, startup_timeout=settings.startup_timeout)
    return ContainerProvisioner(settings)
