"""FastAPI dependencies for client-address resolution.

Route modules declare ``ClientAddressDep`` instead of reading
``request.client.host`` or proxy headers themselves::

    @router.get("/whoami")
    async def whoami(client_address: ClientAddressDep) -> dict:
        return {"ip": client_address}

``get_client_address_resolver`` is a singleton built from the ``proxy``
config section; tests override it via
``app.dependency_overrides[get_client_address_resolver] = ...``.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request

from clientaddr.configs.config import get_proxy_config
from clientaddr.core.models import ResolutionRequest, ResolvedAddress
from clientaddr.core.resolver import ClientAddressResolver
from clientaddr.infra.singleton import singleton


@singleton
def get_client_address_resolver() -> ClientAddressResolver:
    """Return (or create) the process-wide resolver.

    The proxy section (trusted proxies and the trust flag) is fixed
    after the first call; restart (or
    ``get_client_address_resolver.reset()``) to pick up new ones.
    """
    return ClientAddressResolver.from_config(get_proxy_config())


def build_resolution_request(request: Request) -> ResolutionRequest:
    """Translate a Starlette request into a ``ResolutionRequest``."""
    remote = request.client.host if request.client else None
    return ResolutionRequest.from_headers(remote, request.headers.items())


def get_resolved_address(
    request: Request,
    resolver: Annotated[ClientAddressResolver, Depends(get_client_address_resolver)],
) -> ResolvedAddress:
    # The trust flag comes from the same config snapshot as the proxy list.
    return resolver.resolve(
        build_resolution_request(request),
        trust_forwarded_header=resolver.trust_forwarded_header,
    )


def get_client_address(
    resolved: Annotated[ResolvedAddress, Depends(get_resolved_address)],
) -> Optional[str]:
    return resolved.address


ClientAddressResolverDep = Annotated[
    ClientAddressResolver, Depends(get_client_address_resolver)
]
ResolvedAddressDep = Annotated[ResolvedAddress, Depends(get_resolved_address)]
ClientAddressDep = Annotated[Optional[str], Depends(get_client_address)]
