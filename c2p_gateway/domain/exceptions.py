"""Domain-specific exceptions"""

from typing import Optional

from c2p_gateway.domain.errors import NormalizedError


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class GatewayFault(DomainException):
    """
    Raw failure raised near its origin, before classification.

    Carries whatever the origin knows: an internal catalog code, an HTTP
    status, or only a message.
    """

    def __init__(self, message: str, code: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status


class ValidationFault(GatewayFault):
    """Transaction data failed local validation"""

    pass


class CryptoFault(GatewayFault):
    """Encryption or decryption could not proceed"""

    pass


class TransportTimeout(GatewayFault):
    """Gateway call exceeded its time bound"""

    def __init__(self, message: str = "Gateway request timed out"):
        super().__init__(message, code="NET_001")


class NetworkFault(GatewayFault):
    """Connection to the gateway could not be established or was dropped"""

    def __init__(self, message: str = "Network connection to gateway failed"):
        super().__init__(message, code="NET_002")


class HTTPStatusFault(GatewayFault):
    """Gateway answered with a non-2xx status"""

    def __init__(self, status: int, reason: str = ""):
        super().__init__(f"HTTP Error: {status} - {reason}".rstrip(" -"), status=status)


class PaymentGatewayError(DomainException):
    """Terminal failure surfaced to callers; wraps a NormalizedError"""

    def __init__(self, error: NormalizedError):
        super().__init__(f"{error.code}: {error.message}")
        self.error = error
