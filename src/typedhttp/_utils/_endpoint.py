from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class APIEndpoint(Protocol):
    """Capability every endpoint handed to the client must provide.

    ``auth_headers`` returning ``None`` means the call needs authentication but
    no credentials are available. Endpoints that need no auth must return an
    empty mapping instead.
    """

    @property
    def url(self) -> str: ...

    @property
    def identity(self) -> str: ...

    @property
    def auth_headers(self) -> Optional[Mapping[str, str]]: ...


@dataclass(frozen=True)
class Endpoint:
    """Immutable endpoint value.

    Examples:
        >>> users = Endpoint(
        ...     url="https://api.example.com/users",
        ...     identity="users",
        ...     auth_headers={"Authorization": "Bearer token"},
        ... )
        >>> public = Endpoint(url="https://api.example.com/health", identity="health")
    """

    url: str
    identity: str
    auth_headers: Optional[Mapping[str, str]] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.identity
