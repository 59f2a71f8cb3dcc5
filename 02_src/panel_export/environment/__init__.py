"""Environment provisioning module."""

from .provisioner import (
    ContainerProvisioner,
    IEnvironmentProvisioner,
    Service,
    StaticProvisioner,
    create_provisioner,
    wait_until_ready,
)

__all__ = [
    "ContainerProvisioner",
    "IEnvironmentProvisioner",
    "Service",
    "StaticProvisioner",
    "create_provisioner",
    "wait_until_ready",
]
