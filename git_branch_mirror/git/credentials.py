"""Per-call credential configuration for git remote operations.

Credentials are never written to a repository's permanent configuration:
``GitConfigOverrides`` become ``-c key=value`` arguments of the single git
invocation they are attached to. Header credentials are sent as an extra
``Authorization`` header. The ``url`` credential type rewrites the remote URL
to one carrying the credential as user-info with ``url.<base>.insteadOf``, so
the configured remote URL stays free of credentials.

Any credential also disables TLS verification for the call. This accommodates
internal endpoints with self-signed certificates and weakens transport security
for those calls.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping
from urllib.parse import urlsplit, urlunsplit

from git_branch_mirror.configuration.models import CredentialType
from git_branch_mirror.utils.constants import (
    CREDENTIAL_URL_SCHEMES,
    HTTP_EXTRA_HEADER_KEY,
    HTTP_SSL_VERIFY_KEY,
    URL_INSTEAD_OF_KEY_TEMPLATE,
)
from git_branch_mirror.utils.helpers import url_scheme


@dataclass(frozen=True)
class GitConfigOverrides:
    """Git configuration values applied to a single command only."""

    values: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def as_arguments(self) -> list[str]:
        """Render the overrides as git global options, e.g. ['-c', 'http.sslVerify=false']."""
        arguments: list[str] = []
        for key, value in self.values.items():
            arguments.extend(["-c", f"{key}={value}"])
        return arguments

    def __bool__(self) -> bool:
        """Overrides are truthy when at least one value is set."""
        return bool(self.values)


NO_OVERRIDES = GitConfigOverrides()


@dataclass(frozen=True)
class RemoteCredential:
    """A credential value and the way it is presented to the remote host."""

    token: str
    credential_type: CredentialType = CredentialType.URL


def accepts_credentials(url: str | None) -> bool:
    """Return True if credentials may be injected for the URL (HTTP and HTTPS only)."""
    return url_scheme(url) in CREDENTIAL_URL_SCHEMES


def inject_url_credential(url: str, token: str) -> str:
    """Return the URL with the token as its user-info, replacing any user-info already present."""
    parts = urlsplit(url)
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    netloc = f"{token}@{host}"
    if parts.port is not None:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


def authorization_header(credential: RemoteCredential) -> str:
    """Build the Authorization header line for a header-based credential."""
    if credential.credential_type == CredentialType.BEARER:
        return f"Authorization: Bearer {credential.token}"
    if credential.credential_type == CredentialType.BASIC:
        return f"Authorization: Basic {credential.token}"
    raise ValueError(f"Credential type {credential.credential_type.value} is not presented as a header")


def credential_overrides(url: str, credential: RemoteCredential | None) -> GitConfigOverrides:
    """Build the per-call overrides presenting a credential to a remote.

    Args:
        url (str): The URL configured on the remote.
        credential (RemoteCredential | None): The credential to present, if any.

    Returns:
        GitConfigOverrides: The overrides to pass to every call against the remote. Non-HTTP(S) URLs
        and missing credentials get no overrides.
    """
    if credential is None or not credential.token or not accepts_credentials(url):
        return NO_OVERRIDES

    if credential.credential_type == CredentialType.URL:
        rewrite_key = URL_INSTEAD_OF_KEY_TEMPLATE.format(base=inject_url_credential(url, credential.token))
        return GitConfigOverrides(MappingProxyType({rewrite_key: url, HTTP_SSL_VERIFY_KEY: "false"}))

    return GitConfigOverrides(
        MappingProxyType(
            {
                HTTP_EXTRA_HEADER_KEY: authorization_header(credential),
                HTTP_SSL_VERIFY_KEY: "false",
            }
        )
    )
