from __future__ import annotations

import logging
import os
from typing import Literal, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

from . import constants

logger = logging.getLogger(__name__)


class WrapIdentity(BaseModel):
    """Resolved WRAP credentials for one Access Control namespace."""

    model_config = ConfigDict(frozen=True)

    namespace: str
    issuer: str
    access_key: str
    host: str = constants.CLOUD_ACCESS_CONTROL_HOST

    @property
    def protocol(self) -> str:
        return constants.WRAP_PROTOCOL

    @property
    def port(self) -> int:
        return constants.WRAP_PORT

    @property
    def hostname(self) -> str:
        return f"{self.namespace}.{self.host}"


def resolve_identity(
    namespace: Optional[str] = None,
    issuer: Optional[str] = None,
    access_key: Optional[str] = None,
    host: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> WrapIdentity:
    """Resolve WRAP credentials, falling back to the environment and defaults.

    Explicit values win. Otherwise the namespace comes from
    ``AZURE_WRAP_NAMESPACE`` or, failing that, ``AZURE_SERVICEBUS_NAMESPACE``
    plus the ``-sb`` suffix; the issuer from ``AZURE_SERVICEBUS_ISSUER`` or
    ``owner``; the access key from ``AZURE_SERVICEBUS_ACCESS_KEY``. Empty values
    are tolerated here and surface later as an authorization failure.
    """

    environ = os.environ if environ is None else environ

    host = host or constants.CLOUD_ACCESS_CONTROL_HOST

    if not namespace:
        namespace = environ.get(constants.AZURE_WRAP_NAMESPACE)
        if not namespace:
            servicebus_namespace = environ.get(constants.AZURE_SERVICEBUS_NAMESPACE, "")
            if not servicebus_namespace:
                logger.warning(
                    "No WRAP or Service Bus namespace configured; using bare suffix %r",
                    constants.DEFAULT_WRAP_NAMESPACE_SUFFIX,
                )
            namespace = servicebus_namespace + constants.DEFAULT_WRAP_NAMESPACE_SUFFIX

    issuer = (
        issuer
        or environ.get(constants.AZURE_SERVICEBUS_ISSUER)
        or constants.DEFAULT_SERVICEBUS_ISSUER
    )

    access_key = access_key or environ.get(constants.AZURE_SERVICEBUS_ACCESS_KEY) or ""
    if not access_key:
        logger.warning("No WRAP access key configured; token requests will be rejected")

    return WrapIdentity(
        namespace=namespace, issuer=issuer, access_key=access_key, host=host
    )


class TransportConfig(BaseModel):
    """HTTP transport settings."""

    backend: Literal["httpx", "requests"] = "httpx"
    timeout: float = 30.0
    verify: bool = True


class AcsWrapConfig(BaseModel):
    """Top-level configuration model."""

    namespace: Optional[str] = None
    issuer: Optional[str] = None
    access_key: Optional[str] = None
    host: Optional[str] = None
    transport: TransportConfig = Field(default_factory=TransportConfig)


def load_config(path: Optional[str] = None) -> AcsWrapConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to ACSWRAP_CONFIG env
            variable or 'acswrap.yaml' in the current directory.
    """

    config_path = path or os.getenv("ACSWRAP_CONFIG", "acswrap.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = AcsWrapConfig(**data)
    else:
        config = AcsWrapConfig()

    env_backend = os.getenv("ACSWRAP_TRANSPORT")
    if env_backend:
        config.transport.backend = env_backend.lower()
    return config
