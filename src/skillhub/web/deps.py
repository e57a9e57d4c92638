from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from skillhub.app import App
from skillhub.core.modules.token.models import TokenIdentity

# The header value is the token itself; a "Bearer " prefix is tolerated
authorization_scheme = APIKeyHeader(name="Authorization", auto_error=False, scheme_name="AuthorizationToken")

BEARER_SCHEME = "bearer"


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


def extract_token(header_value: str | None) -> str | None:
    if header_value is None:
        return None
    value = header_value.strip()
    scheme, _, credentials = value.partition(" ")
    if scheme.lower() == BEARER_SCHEME:
        value = credentials.strip()
    return value or None


async def get_token(
    authorization: Annotated[str | None, Depends(authorization_scheme)] = None,
) -> str | None:
    return extract_token(authorization)


async def get_identity(
    request: Request,
    app: Annotated[App, Depends(get_app)],
    token: Annotated[str | None, Depends(get_token)],
) -> TokenIdentity:
    """Gate a protected route: 401 without a token, 403 for a bad one."""
    identity = await app.authenticate(token)
    request.state.identity = identity
    return identity


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
TokenDep = Annotated[str | None, Depends(get_token)]
IdentityDep = Annotated[TokenIdentity, Depends(get_identity)]
