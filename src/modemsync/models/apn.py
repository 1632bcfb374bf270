"""APN context models."""

from __future__ import annotations

from pydantic import Field

from modemsync.models._base import ModemBaseModel


class ApnContext(ModemBaseModel):
    """One packet-data context as exposed by the modem manager.

    ``path`` is the D-Bus object path and identifies the context in
    :class:`~modemsync.models.requests.SetApnRequest`.
    """

    path: str = ""
    name: str = ""
    active: bool = False
    apn: str = ""
    protocol: str = ""
    username: str = ""
    password: str = ""
    auth_method: str = ""
    context_type: str = ""


class ApnList(ModemBaseModel):
    contexts: list[ApnContext] = Field(default_factory=list)
