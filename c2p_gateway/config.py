"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from c2p_gateway.domain.models import Credentials

PRODUCTION_ALIASES = {"prod", "production"}
CERTIFICATION_ALIASES = {"cert", "certification", "sandbox"}


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Environment selector: "prod" or "cert"
    mercantil_environment: str = "cert"

    # Production credentials
    mercantil_search_client_id: str = ""
    mercantil_search_merchant_id: str = ""
    mercantil_search_secret_key: str = ""
    mercantil_search_endpoint: str = ""

    # Certification (sandbox) credentials
    mercantil_cert_client_id: str = ""
    mercantil_cert_merchant_id: str = ""
    mercantil_cert_secret_key: str = ""
    mercantil_cert_endpoint: str = "https://apimbu.mercantilbanco.com/mercantil-banco/sandbox/v1/payment/c2p"

    # C2P defaults
    mercantil_destination_bank_id: str = "0105"
    mercantil_destination_mobile: str = ""

    # Service
    service_name: str = "c2p-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 30.0
    gateway_max_retries: int = 3
    gateway_backoff_base_ms: int = 1000
    gateway_backoff_max_ms: int = 30000

    def credentials_for(self, environment: str | None = None) -> Credentials:
        """
        Resolve the credential tuple for an environment selector.

        Raises:
            ValueError: If the selector is neither a production nor a certification alias
        """
        env = (environment or self.mercantil_environment).strip().lower()
        if env in PRODUCTION_ALIASES:
            return Credentials(
                client_id=self.mercantil_search_client_id,
                merchant_id=self.mercantil_search_merchant_id,
                secret_key=self.mercantil_search_secret_key,
                endpoint=self.mercantil_search_endpoint,
            )
        if env in CERTIFICATION_ALIASES:
            return Credentials(
                client_id=self.mercantil_cert_client_id,
                merchant_id=self.mercantil_cert_merchant_id,
                secret_key=self.mercantil_cert_secret_key,
                endpoint=self.mercantil_cert_endpoint,
            )
        raise ValueError(f"Unknown Mercantil environment: {environment!r}")


settings = Settings()
