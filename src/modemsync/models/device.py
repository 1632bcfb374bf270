"""Device, SIM, registration and QoS models shown on the dashboard."""

from __future__ import annotations

from pydantic import Field

from modemsync.models._base import ModemBaseModel


class DeviceInfo(ModemBaseModel):
    imei: str = ""
    manufacturer: str = ""
    model: str = ""
    revision: str | None = None
    online: bool = False
    powered: bool = False


class SimInfo(ModemBaseModel):
    present: bool = False
    iccid: str = ""
    imsi: str = ""
    phone_numbers: list[str] = Field(default_factory=list)
    sms_center: str = ""
    mcc: str = ""
    mnc: str = ""
    pin_required: str = ""
    preferred_languages: list[str] = Field(default_factory=list)


class NetworkInfo(ModemBaseModel):
    operator_name: str = ""
    registration_status: str = ""
    technology_preference: str = ""
    signal_strength: int | None = None
    mcc: str | None = None
    mnc: str | None = None


class QosInfo(ModemBaseModel):
    qci: int | None = None
    dl_speed: int | None = None
    ul_speed: int | None = None


class ImeisvInfo(ModemBaseModel):
    software_version_number: str = ""


class SimSlotInfo(ModemBaseModel):
    """Active SIM slot; ``active_slot`` is 0 when the modem reply was not recognized."""

    active_slot: int = 0
    raw_value: str = ""


class SimSlotSwitchResult(ModemBaseModel):
    response: str = ""
