"""WRAP v0.9 token acquisition against the Access Control Service."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Mapping, Optional, Set, Union
from urllib.parse import quote

from . import constants
from .config import AcsWrapConfig, WrapIdentity, load_config, resolve_identity
from .contracts import AcquisitionResult, AcsTokenResult, RequestOptions, WebResource
from .errors import InvalidArgumentError, TransportError
from .transports import BaseHttpTransport, get_transport

logger = logging.getLogger(__name__)

TokenCallback = Callable[..., Any]

# Characters left unescaped by JavaScript's encodeURIComponent.
_UNRESERVED = "-_.!~*'()"


def build_wrap_body(issuer: str, access_key: str, scope_uri: str) -> str:
    """Compose the form body for a WRAP token request."""
    return "&".join(
        (
            "wrap_name=" + quote(issuer or "", safe=_UNRESERVED),
            "wrap_password=" + quote(access_key or "", safe=_UNRESERVED),
            "wrap_scope=" + quote(scope_uri or "", safe=_UNRESERVED),
        )
    )


def validate_callback(callback: Optional[TokenCallback]) -> None:
    if not callback:
        raise InvalidArgumentError("Callback must be specified.")


class WrapService:
    """Client that exchanges an issuer name and key for an ACS token."""

    def __init__(
        self,
        namespace: Optional[str] = None,
        issuer: Optional[str] = None,
        access_key: Optional[str] = None,
        host: Optional[str] = None,
        *,
        identity: Optional[WrapIdentity] = None,
        transport: Optional[BaseHttpTransport] = None,
    ) -> None:
        if identity is not None:
            if any(value is not None for value in (namespace, issuer, access_key, host)):
                raise InvalidArgumentError(
                    "Pass either an identity or namespace/issuer/access_key/host, not both."
                )
            self.identity = identity
        else:
            self.identity = resolve_identity(
                namespace=namespace, issuer=issuer, access_key=access_key, host=host
            )
        self._transport = transport or get_transport()
        self._pending: Set["asyncio.Task[AcquisitionResult]"] = set()

    @classmethod
    def from_config(
        cls,
        config: Optional[AcsWrapConfig] = None,
        transport: Optional[BaseHttpTransport] = None,
    ) -> "WrapService":
        """Create a service from YAML/environment configuration."""
        config = config or load_config()
        return cls(
            config.namespace,
            config.issuer,
            config.access_key,
            config.host,
            transport=transport or get_transport(config=config),
        )

    async def __aenter__(self) -> "WrapService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()

    @property
    def transport(self) -> BaseHttpTransport:
        return self._transport

    @property
    def namespace(self) -> str:
        return self.identity.namespace

    @property
    def issuer(self) -> str:
        return self.identity.issuer

    @property
    def host(self) -> str:
        return self.identity.host

    def get_path(self, path: Optional[str]) -> str:
        """Return ``path`` with a leading slash; ``None`` becomes ``/``."""
        if path is None:
            return "/"
        if not path.startswith("/"):
            return "/" + path
        return path

    def get_hostname(self) -> str:
        return self.identity.hostname

    def get_request_host(self) -> str:
        return self.get_hostname()

    def get_request_port(self) -> int:
        return self.identity.port

    def build_request_options(self, web_resource: WebResource) -> RequestOptions:
        """Bind ``web_resource`` to this namespace's host and port."""
        web_resource.add_optional_header(constants.CONTENT_TYPE_HEADER, "")
        return RequestOptions(
            method=web_resource.http_verb,
            path=self.get_path(web_resource.path),
            host=self.get_request_host(),
            port=self.get_request_port(),
            headers=dict(web_resource.headers),
            protocol=self.identity.protocol,
        )

    def build_token_request(self) -> WebResource:
        web_resource = (
            WebResource.post(constants.WRAP_PATH)
            .with_ok_code(constants.HTTP_OK)
            .with_raw_response(True)
        )
        web_resource.add_optional_header(
            constants.CONTENT_TYPE_HEADER, constants.FORM_CONTENT_TYPE
        )
        return web_resource

    async def acquire_token(
        self, scope_uri: str, options: Optional[Mapping[str, Any]] = None
    ) -> AcquisitionResult:
        """Request a token for ``scope_uri``.

        Failures never raise; they are returned in the ``error`` slot with
        ``token_result`` set to ``None``. The raw response is returned whenever
        the transport produced one.
        """
        try:
            web_resource = self.build_token_request()
            request_options = self.build_request_options(web_resource)
            body = build_wrap_body(
                self.identity.issuer, self.identity.access_key, scope_uri
            )
        except Exception as exc:
            logger.warning("Could not build WRAP token request for %s: %s", scope_uri, exc)
            return AcquisitionResult(exc, None, None)

        logger.debug(
            "Requesting WRAP token from %s%s for scope %s",
            request_options.host,
            request_options.path,
            scope_uri,
        )

        try:
            response = await self._transport.send(
                web_resource, request_options, body, dict(options or {})
            )
        except TransportError as exc:
            logger.warning("WRAP token request for %s failed: %s", scope_uri, exc)
            return AcquisitionResult(exc, None, exc.response)
        except Exception as exc:
            logger.warning("WRAP token request for %s failed: %s", scope_uri, exc)
            return AcquisitionResult(exc, None, None)

        try:
            token_result = AcsTokenResult.parse(response.body)
        except Exception as exc:
            logger.warning("Could not decode WRAP response for %s: %s", scope_uri, exc)
            return AcquisitionResult(exc, None, response)

        logger.info(
            "Acquired WRAP token for %s (expires in %ss)",
            scope_uri,
            token_result.expires_in,
        )
        return AcquisitionResult(None, token_result, response)

    def wrap_access_token(
        self,
        uri: str,
        options_or_callback: Union[Mapping[str, Any], TokenCallback, None] = None,
        callback: Optional[TokenCallback] = None,
    ) -> "asyncio.Task[AcquisitionResult]":
        """Schedule a token request and report it through ``callback``.

        ``callback`` receives ``(error, token_result, response)`` exactly once.
        It may be passed in place of ``options``. A missing callback raises
        :class:`InvalidArgumentError` before anything is scheduled. Must be
        called with a running event loop; the returned task resolves to the
        same :class:`AcquisitionResult`. The service keeps a reference to the
        task until it finishes; exceptions raised by ``callback`` are logged.
        """
        options: Optional[Mapping[str, Any]] = None
        if callable(options_or_callback) and callback is None:
            callback = options_or_callback
        else:
            options = options_or_callback  # type: ignore[assignment]

        validate_callback(callback)
        loop = asyncio.get_running_loop()

        async def _run() -> AcquisitionResult:
            result = await self.acquire_token(uri, options)
            try:
                callback(result.error, result.token_result, result.response)
            except Exception:
                logger.exception("WRAP token callback for %s raised", uri)
            return result

        task = loop.create_task(_run())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task
