"""Identity supplied by the upstream gateway.

Token verification happens before requests reach this service. The gateway
forwards the verified subject and role as headers, which are trusted as-is.
"""

from dataclasses import dataclass

from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication
from rest_framework.request import Request

from ticketing.domain import Actor, Role, UserId

USER_ID_HEADER = "HTTP_X_USER_ID"
USER_ROLE_HEADER = "HTTP_X_USER_ROLE"


@dataclass(frozen=True)
class GatewayUser:
    """Request user carrying the actor. Satisfies DRF's permission checks."""

    actor: Actor

    is_authenticated = True
    is_anonymous = False


class GatewayIdentityAuthentication(BaseAuthentication):
    """Authenticate from X-User-Id and X-User-Role headers."""

    def authenticate(self, request: Request) -> tuple[GatewayUser, None] | None:
        raw_id = request.META.get(USER_ID_HEADER)
        if not raw_id:
            return None
        try:
            user_id = UserId.from_string(raw_id)
        except ValueError:
            raise exceptions.AuthenticationFailed("Invalid X-User-Id header") from None
        try:
            role = Role(request.META.get(USER_ROLE_HEADER, Role.USER.value).lower())
        except ValueError:
            raise exceptions.AuthenticationFailed("Invalid X-User-Role header") from None
        return GatewayUser(Actor(user_id=user_id, role=role)), None

    def authenticate_header(self, request: Request) -> str:
        return "Gateway"
