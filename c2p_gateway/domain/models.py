"""Domain models - pure Python dataclasses representing C2P protocol entities"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional

BUSINESS_FAILURE_CODE = 99999

DEFAULT_DEVICE_VALUE = "Unknown"
DEFAULT_LATITUDE = 10.4806
DEFAULT_LONGITUDE = -66.9036


@dataclass(frozen=True)
class Credentials:
    """Merchant credentials issued by the bank for one environment"""

    client_id: str
    merchant_id: str
    secret_key: str
    endpoint: str

    def __repr__(self) -> str:
        return (
            f"Credentials(client_id={self.client_id!r}, merchant_id={self.merchant_id!r}, "
            f"secret_key='***', endpoint={self.endpoint!r})"
        )


@dataclass
class TransactionRequest:
    """C2P transaction data supplied by the caller"""

    amount: Decimal
    destination_bank_id: str
    destination_id: str
    origin_mobile_number: str
    destination_mobile_number: str
    invoice_number: Optional[str] = None


@dataclass
class Location:
    lat: float = DEFAULT_LATITUDE
    lng: float = DEFAULT_LONGITUDE


@dataclass
class DeviceInfo:
    """Descriptive device metadata; every field is optional"""

    manufacturer: Optional[str] = None
    model: Optional[str] = None
    os_version: Optional[str] = None
    location: Optional[Location] = None


@dataclass
class ClientContext:
    """Request metadata forwarded to the gateway as client identity"""

    ip_address: str
    user_agent: str
    device_info: Optional[DeviceInfo] = None


@dataclass
class InfoMsg:
    gu_id: Optional[str] = None
    channel: Optional[str] = None
    subchannel: Optional[str] = None
    appl_id: Optional[str] = None
    person_id: Optional[str] = None
    user_id: Optional[str] = None
    token: Optional[str] = None
    action: Optional[str] = None
    token_s: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "InfoMsg":
        return cls(
            gu_id=payload.get("guId"),
            channel=payload.get("channel"),
            subchannel=payload.get("subchannel"),
            appl_id=payload.get("applId"),
            person_id=payload.get("personId"),
            user_id=payload.get("userId"),
            token=payload.get("token"),
            action=payload.get("action"),
            token_s=payload.get("tokenS"),
        )


@dataclass
class GatewayResponse:
    """
    Decrypted C2P response.

    A transport-level success does not imply the key was granted: the bank
    reports logical failure through `code` (absent or 99999).
    """

    processing_date: Optional[str] = None
    info_msg: InfoMsg = field(default_factory=InfoMsg)
    code: Optional[int] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def is_success(self) -> bool:
        return self.code is not None and self.code != BUSINESS_FAILURE_CODE

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "GatewayResponse":
        """
        Build a response from the bank's JSON object.

        Raises:
            TypeError: If the payload is not a JSON object
        """
        if not isinstance(payload, dict):
            raise TypeError(f"Expected JSON object from gateway, got {type(payload).__name__}")

        code = payload.get("code")
        if code is not None:
            try:
                code = int(code)
            except (TypeError, ValueError):
                code = None

        info_msg = payload.get("infoMsg")
        return cls(
            processing_date=payload.get("processingDate"),
            info_msg=InfoMsg.from_payload(info_msg) if isinstance(info_msg, dict) else InfoMsg(),
            code=code,
            raw=payload,
        )
