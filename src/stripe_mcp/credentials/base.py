"""Credential specification shared by every integration."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CredentialSpec:
    """Describes one credential: where it comes from and how to check it."""

    env_var: str
    """Environment variable the credential is read from."""

    tools: list[str] = field(default_factory=list)
    """Tools that cannot run without this credential."""

    required: bool = True
    """Whether the server refuses to start without it."""

    help_url: str = ""
    description: str = ""

    health_check_endpoint: str = ""
    health_check_method: str = "GET"
