"""
Error catalog and classifier for the Mercantil C2P gateway.

Every failure (local validation, HTTP status, network fault, crypto fault)
is mapped exactly once into a NormalizedError. The classifier is pure: it
performs no I/O and no logging.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode(str, Enum):
    """Internal error codes with a fixed catalog entry"""

    AUTH_001 = "AUTH_001"
    AUTH_002 = "AUTH_002"
    AUTH_003 = "AUTH_003"
    CONFIG_001 = "CONFIG_001"
    VAL_001 = "VAL_001"
    VAL_002 = "VAL_002"
    VAL_003 = "VAL_003"
    VAL_004 = "VAL_004"
    VAL_005 = "VAL_005"
    VAL_006 = "VAL_006"
    VAL_007 = "VAL_007"
    SEARCH_001 = "SEARCH_001"
    SEARCH_002 = "SEARCH_002"
    SEARCH_003 = "SEARCH_003"
    NET_001 = "NET_001"
    NET_002 = "NET_002"
    SYS_001 = "SYS_001"
    SYS_002 = "SYS_002"
    CRYPTO_001 = "CRYPTO_001"
    CRYPTO_002 = "CRYPTO_002"
    C2P_001 = "C2P_001"
    C2P_002 = "C2P_002"


@dataclass(frozen=True)
class NormalizedError:
    """Single error currency used above the transport boundary"""

    code: str
    message: str
    user_message: str
    severity: Severity
    retryable: bool

    def to_dict(self) -> Dict[str, object]:
        return {
            "code": self.code,
            "message": self.message,
            "user_message": self.user_message,
            "severity": self.severity.value,
            "retryable": self.retryable,
        }


_CONFIG_USER_MESSAGE = "Error de configuración. Contacte al administrador."
_INVALID_PHONE_USER_MESSAGE = "El número de teléfono debe tener el formato 04XX-XXXXXXX."


def _entry(code: ErrorCode, message: str, user_message: str, severity: Severity, retryable: bool) -> NormalizedError:
    return NormalizedError(code.value, message, user_message, severity, retryable)


CATALOG: Dict[ErrorCode, NormalizedError] = {
    # Authentication / configuration
    ErrorCode.AUTH_001: _entry(ErrorCode.AUTH_001, "Invalid client id", _CONFIG_USER_MESSAGE, Severity.CRITICAL, False),
    ErrorCode.AUTH_002: _entry(ErrorCode.AUTH_002, "Invalid secret key", _CONFIG_USER_MESSAGE, Severity.CRITICAL, False),
    ErrorCode.AUTH_003: _entry(
        ErrorCode.AUTH_003, "Token expired", "Sesión expirada. Intente nuevamente.", Severity.MEDIUM, True
    ),
    ErrorCode.CONFIG_001: _entry(
        ErrorCode.CONFIG_001, "Gateway credentials are missing or malformed", _CONFIG_USER_MESSAGE, Severity.CRITICAL, False
    ),
    # Validation
    ErrorCode.VAL_001: _entry(
        ErrorCode.VAL_001, "Invalid origin mobile number", _INVALID_PHONE_USER_MESSAGE, Severity.LOW, False
    ),
    ErrorCode.VAL_002: _entry(
        ErrorCode.VAL_002,
        "Invalid payment reference or invoice number",
        "La referencia de pago no tiene un formato válido.",
        Severity.LOW,
        False,
    ),
    ErrorCode.VAL_003: _entry(
        ErrorCode.VAL_003, "Invalid amount", "El monto debe ser un número positivo.", Severity.LOW, False
    ),
    ErrorCode.VAL_004: _entry(
        ErrorCode.VAL_004, "Invalid date", "La fecha debe estar en formato válido (YYYY-MM-DD).", Severity.LOW, False
    ),
    ErrorCode.VAL_005: _entry(
        ErrorCode.VAL_005,
        "Invalid destination bank code",
        "El código del banco destino no es válido.",
        Severity.LOW,
        False,
    ),
    ErrorCode.VAL_006: _entry(
        ErrorCode.VAL_006,
        "Invalid destination identification",
        "La identificación del destinatario no es válida.",
        Severity.LOW,
        False,
    ),
    ErrorCode.VAL_007: _entry(
        ErrorCode.VAL_007, "Invalid destination mobile number", _INVALID_PHONE_USER_MESSAGE, Severity.LOW, False
    ),
    # Search
    ErrorCode.SEARCH_001: _entry(
        ErrorCode.SEARCH_001,
        "Payment not found",
        "No se encontró ningún pago con los criterios especificados.",
        Severity.LOW,
        False,
    ),
    ErrorCode.SEARCH_002: _entry(
        ErrorCode.SEARCH_002,
        "Multiple payments found",
        "Se encontraron múltiples pagos. Refine los criterios de búsqueda.",
        Severity.MEDIUM,
        False,
    ),
    ErrorCode.SEARCH_003: _entry(
        ErrorCode.SEARCH_003,
        "Insufficient search criteria",
        "Debe proporcionar al menos un criterio de búsqueda válido.",
        Severity.LOW,
        False,
    ),
    # Network and system
    ErrorCode.NET_001: _entry(
        ErrorCode.NET_001,
        "Connection timeout",
        "La conexión tardó demasiado. Intente nuevamente.",
        Severity.MEDIUM,
        True,
    ),
    ErrorCode.NET_002: _entry(
        ErrorCode.NET_002,
        "Connection error",
        "No se pudo conectar con el servidor. Verifique su conexión.",
        Severity.MEDIUM,
        True,
    ),
    ErrorCode.SYS_001: _entry(
        ErrorCode.SYS_001,
        "Service temporarily unavailable",
        "El servicio no está disponible temporalmente. Intente más tarde.",
        Severity.HIGH,
        True,
    ),
    ErrorCode.SYS_002: _entry(
        ErrorCode.SYS_002,
        "Internal server error",
        "Error interno del sistema. Contacte al soporte técnico.",
        Severity.CRITICAL,
        False,
    ),
    # Cryptography
    ErrorCode.CRYPTO_001: _entry(
        ErrorCode.CRYPTO_001,
        "Encryption error",
        "Error en el procesamiento de datos. Contacte al administrador.",
        Severity.CRITICAL,
        False,
    ),
    ErrorCode.CRYPTO_002: _entry(
        ErrorCode.CRYPTO_002,
        "Decryption error",
        "Error en el procesamiento de respuesta. Intente nuevamente.",
        Severity.HIGH,
        True,
    ),
    # Gateway business outcome
    ErrorCode.C2P_001: _entry(
        ErrorCode.C2P_001,
        "Gateway rejected the C2P key request",
        "El banco rechazó la solicitud de pago. Verifique los datos e intente nuevamente.",
        Severity.MEDIUM,
        False,
    ),
    ErrorCode.C2P_002: _entry(
        ErrorCode.C2P_002,
        "Receiver bank is not supported for C2P verification",
        "Banco receptor no soportado para verificación C2P.",
        Severity.LOW,
        False,
    ),
}

HTTP_400 = NormalizedError(
    "HTTP_400",
    "Invalid request",
    "Los datos enviados no son válidos. Verifique la información.",
    Severity.LOW,
    False,
)
HTTP_403 = NormalizedError(
    "HTTP_403",
    "Access denied",
    "No tiene permisos para realizar esta operación.",
    Severity.HIGH,
    False,
)
HTTP_429 = NormalizedError(
    "HTTP_429",
    "Too many requests",
    "Ha excedido el límite de solicitudes. Intente más tarde.",
    Severity.MEDIUM,
    True,
)

HTTP_STATUS_MAP: Dict[int, NormalizedError] = {
    400: HTTP_400,
    401: CATALOG[ErrorCode.AUTH_001],
    403: HTTP_403,
    404: CATALOG[ErrorCode.SEARCH_001],
    408: CATALOG[ErrorCode.NET_001],
    429: HTTP_429,
    500: CATALOG[ErrorCode.SYS_001],
    502: CATALOG[ErrorCode.SYS_001],
    503: CATALOG[ErrorCode.SYS_001],
    504: CATALOG[ErrorCode.NET_001],
}

# Substring patterns checked in order against the lowercased fault message
MESSAGE_PATTERNS = (
    (("timeout", "timed out"), ErrorCode.NET_001),
    (("network", "connection"), ErrorCode.NET_002),
    (("encrypt",), ErrorCode.CRYPTO_001),
    (("decrypt",), ErrorCode.CRYPTO_002),
    # "descifr" contains "cifr"
    (("descifr",), ErrorCode.CRYPTO_002),
    (("cifr",), ErrorCode.CRYPTO_001),
)

UNKNOWN_USER_MESSAGE = "Ocurrió un error inesperado. Intente nuevamente o contacte al soporte."


def catalog_error(code: ErrorCode) -> NormalizedError:
    return CATALOG[code]


def lookup_code(code: object) -> Optional[NormalizedError]:
    """Return the catalog entry for a short code, or None if it is not catalogued"""
    if code is None:
        return None
    try:
        return CATALOG[ErrorCode(code)]
    except ValueError:
        return None


def _fault_status(fault: object) -> Optional[int]:
    status = getattr(fault, "status", None)
    if status is None:
        response = getattr(fault, "response", None)
        status = getattr(response, "status_code", None)
    return status if isinstance(status, int) else None


def _fault_message(fault: object) -> str:
    message = getattr(fault, "message", None)
    if isinstance(message, str) and message:
        return message
    if isinstance(fault, BaseException):
        return str(fault)
    return ""


def classify(fault: object) -> NormalizedError:
    """
    Map any failure to a NormalizedError.

    Precedence (first match wins):
    1. An already-normalized failure keeps its error
    2. A known internal catalog code
    3. An HTTP status code
    4. Message substrings (case-insensitive)
    5. Generic UNKNOWN, medium severity, retryable
    """
    normalized = getattr(fault, "error", None)
    if isinstance(normalized, NormalizedError):
        return normalized
    if isinstance(fault, NormalizedError):
        return fault

    entry = lookup_code(getattr(fault, "code", None))
    if entry is not None:
        return entry

    status = _fault_status(fault)
    if status is not None and status in HTTP_STATUS_MAP:
        return HTTP_STATUS_MAP[status]

    message = _fault_message(fault)
    lowered = message.lower()
    for needles, code in MESSAGE_PATTERNS:
        if any(needle in lowered for needle in needles):
            return CATALOG[code]

    return NormalizedError(
        "UNKNOWN",
        message or "Unknown error",
        UNKNOWN_USER_MESSAGE,
        Severity.MEDIUM,
        True,
    )


def is_retryable(error: NormalizedError) -> bool:
    """Critical errors are never retried, even if flagged retryable"""
    return error.retryable and error.severity is not Severity.CRITICAL
