"""OTA update status and package validation models."""

from __future__ import annotations

from modemsync.models._base import ModemBaseModel


class OtaMeta(ModemBaseModel):
    version: str = ""
    commit: str = ""
    build_time: str = ""
    binary_md5: str = ""
    frontend_md5: str = ""
    arch: str = ""
    min_version: str | None = None


class OtaValidation(ModemBaseModel):
    valid: bool = False
    is_newer: bool = False
    binary_md5_match: bool = False
    frontend_md5_match: bool = False
    arch_match: bool = False
    error: str | None = None


class OtaStatus(ModemBaseModel):
    current_version: str = ""
    current_commit: str = ""
    pending_update: bool = False
    pending_meta: OtaMeta | None = None


class OtaUploadResult(ModemBaseModel):
    meta: OtaMeta | None = None
    validation: OtaValidation | None = None


class OtaApplyResult(ModemBaseModel):
    applied: bool = False
