from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Optional
from datetime import datetime

from threatsense.core.severity import Severity


def as_text(value: Any) -> str:
    """Render an agent value as payload text; booleans become ``true``/``false``."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class WireModel(BaseModel):
    """Immutable record keyed by the monitoring agent's field names on the wire."""

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        coerce_numbers_to_str=True,
    )


class ThreatEventPayload(WireModel):
    """Flat threat event record as delivered by the monitoring agent.

    Every field is text, including the numeric-looking ones: any non-None
    value is read as text on the way in. Only the eight fields checked by the
    validator are required; unknown keys are kept for pass-through export.
    """

    model_config = ConfigDict(extra="allow")

    # Threat identification
    reason_code: str = Field(..., alias="reasonCode")
    threat_code: str = Field(..., alias="threatCode")
    external_id: str = Field(..., alias="externalID")
    reason_data: Optional[str] = Field(None, alias="reasonData")

    # Device information
    device_id: str = Field(..., alias="deviceID")
    device_model: str = Field(..., alias="deviceModel")
    device_manufacturer: Optional[str] = Field(None, alias="deviceManufacturer")
    device_brand: Optional[str] = Field(None, alias="deviceBrand")
    device_board: Optional[str] = Field(None, alias="deviceBoard")
    os_version: Optional[str] = Field(None, alias="osVersion")
    arch: Optional[str] = Field(None, alias="Arch")
    baseband_version: Optional[str] = Field(None, alias="basebandVersion")
    carrier_plmn: Optional[str] = Field(None, alias="carrierPlmn")

    # Build and system info
    build_number: Optional[str] = Field(None, alias="buildNumber")
    build_host: Optional[str] = Field(None, alias="buildHost")
    build_user: Optional[str] = Field(None, alias="buildUser")
    kernel_info: Optional[str] = Field(None, alias="kernelInfo")
    sdk_version: Optional[str] = Field(None, alias="sdkVersion")
    is_aab: Optional[str] = Field(None, alias="isAAB")

    # Security and sandbox info
    sandbox_path: Optional[str] = Field(None, alias="sandboxPath")
    is_sandbox_path_writable: Optional[str] = Field(None, alias="isSandboxPathWritable")
    is_proc_readable: Optional[str] = Field(None, alias="isProcReadable")
    uid: Optional[str] = Field(None, alias="UID")

    # Messages
    message: str = Field(..., alias="message")
    default_message: Optional[str] = Field(None, alias="defaultMessage")

    # Identifiers and timing
    uuid: str = Field(..., alias="UUID")
    fused_app_token: Optional[str] = Field(None, alias="fusedAppToken")
    timestamp: str = Field(..., alias="timestamp")

    @field_validator("*", mode="before")
    @classmethod
    def _read_as_text(cls, value: Any) -> Optional[str]:
        return None if value is None else as_text(value)


class DeviceInfo(WireModel):
    device_id: str = Field(..., alias="deviceID")
    device_model: str = Field(..., alias="deviceModel")
    device_manufacturer: Optional[str] = Field(None, alias="deviceManufacturer")
    device_brand: Optional[str] = Field(None, alias="deviceBrand")
    device_board: Optional[str] = Field(None, alias="deviceBoard")
    os_version: Optional[str] = Field(None, alias="osVersion")
    arch: Optional[str] = Field(None, alias="Arch")
    baseband_version: Optional[str] = Field(None, alias="basebandVersion")
    carrier_plmn: Optional[str] = Field(None, alias="carrierPlmn")


class BuildInfo(WireModel):
    build_number: Optional[str] = Field(None, alias="buildNumber")
    build_host: Optional[str] = Field(None, alias="buildHost")
    build_user: Optional[str] = Field(None, alias="buildUser")
    kernel_info: Optional[str] = Field(None, alias="kernelInfo")
    sdk_version: Optional[str] = Field(None, alias="sdkVersion")
    is_aab: Optional[str] = Field(None, alias="isAAB")


class SecurityInfo(WireModel):
    sandbox_path: Optional[str] = Field(None, alias="sandboxPath")
    is_sandbox_path_writable: Optional[str] = Field(None, alias="isSandboxPathWritable")
    is_proc_readable: Optional[str] = Field(None, alias="isProcReadable")
    uid: Optional[str] = Field(None, alias="UID")


class ThreatDetails(WireModel):
    reason_code: str = Field(..., alias="reasonCode")
    threat_code: str = Field(..., alias="threatCode")
    external_id: str = Field(..., alias="externalID")
    reason_data: Optional[str] = Field(None, alias="reasonData")


class ThreatMessages(WireModel):
    message: str = Field(..., alias="message")
    default_message: Optional[str] = Field(None, alias="defaultMessage")


class ThreatIdentifiers(WireModel):
    uuid: str = Field(..., alias="UUID")
    fused_app_token: Optional[str] = Field(None, alias="fusedAppToken")
    timestamp: str = Field(..., alias="timestamp")


class ProcessedThreatEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    payload: ThreatEventPayload
    device_info: DeviceInfo
    build_info: BuildInfo
    security_info: SecurityInfo
    threat_details: ThreatDetails
    messages: ThreatMessages
    identifiers: ThreatIdentifiers
    severity: Severity
    detected_at: datetime
    resolved: bool = False


class ThreatSummary(BaseModel):
    title: str
    description: Optional[str] = None
    severity: Severity
    timestamp: str
    device_info: str
