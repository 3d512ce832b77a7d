"""Unit tests for per-environment credential loading"""

import pytest

from c2p_gateway.config import Settings
from c2p_gateway.domain.exceptions import PaymentGatewayError
from c2p_gateway.infrastructure.clients.mercantil import MercantilClient


@pytest.fixture
def env_settings(monkeypatch) -> Settings:
    monkeypatch.setenv("MERCANTIL_SEARCH_CLIENT_ID", "prod-client")
    monkeypatch.setenv("MERCANTIL_SEARCH_MERCHANT_ID", "100001")
    monkeypatch.setenv("MERCANTIL_SEARCH_SECRET_KEY", "prod-secret")
    monkeypatch.setenv("MERCANTIL_SEARCH_ENDPOINT", "https://prod.example/payment/c2p")
    monkeypatch.setenv("MERCANTIL_CERT_CLIENT_ID", "cert-client")
    monkeypatch.setenv("MERCANTIL_CERT_MERCHANT_ID", "200284")
    monkeypatch.setenv("MERCANTIL_CERT_SECRET_KEY", "cert-secret")
    return Settings(_env_file=None)


@pytest.mark.parametrize("environment", ["prod", "production", "PROD"])
def test_production_aliases(env_settings, environment):
    credentials = env_settings.credentials_for(environment)
    assert credentials.client_id == "prod-client"
    assert credentials.merchant_id == "100001"
    assert credentials.endpoint == "https://prod.example/payment/c2p"


@pytest.mark.parametrize("environment", ["cert", "certification", "sandbox"])
def test_certification_aliases(env_settings, environment):
    credentials = env_settings.credentials_for(environment)
    assert credentials.client_id == "cert-client"
    assert credentials.secret_key == "cert-secret"
    assert "sandbox" in credentials.endpoint


def test_default_environment_is_certification(env_settings):
    assert env_settings.credentials_for().client_id == "cert-client"


def test_unknown_environment_is_rejected(env_settings):
    with pytest.raises(ValueError):
        env_settings.credentials_for("staging")


def test_secret_is_masked_in_repr(env_settings):
    assert "cert-secret" not in repr(env_settings.credentials_for("cert"))


def test_from_settings_unknown_environment_is_config_error():
    with pytest.raises(PaymentGatewayError) as exc_info:
        MercantilClient.from_settings("staging")
    assert exc_info.value.error.code == "CONFIG_001"
