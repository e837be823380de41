"""Tests for TLS context loading and installation."""

import ssl
from unittest.mock import Mock

import pytest

from kafka_auth.errors import TLSConfigLoadError
from kafka_auth.security.ssl_utils import get_ca_bundle_path
from kafka_auth.security.tls import TLSClientSettings, configure_tls, load_tls_context


@pytest.fixture(autouse=True)
def _no_ca_bundle_env(monkeypatch):
    for name in ("SSL_CERT_FILE", "REQUESTS_CA_BUNDLE", "CURL_CA_BUNDLE"):
        monkeypatch.delenv(name, raising=False)


class TestGetCABundlePath:

    def test_none_when_unset(self):
        assert get_ca_bundle_path() is None

    def test_ssl_cert_file_takes_precedence(self, monkeypatch):
        monkeypatch.setenv("REQUESTS_CA_BUNDLE", "/requests.pem")
        monkeypatch.setenv("SSL_CERT_FILE", "/ssl.pem")

        assert get_ca_bundle_path() == "/ssl.pem"

    def test_curl_bundle_fallback(self, monkeypatch):
        monkeypatch.setenv("CURL_CA_BUNDLE", "/curl.pem")

        assert get_ca_bundle_path() == "/curl.pem"


class TestLoadTLSContext:

    def test_default_settings_verify_peers(self):
        context = load_tls_context(TLSClientSettings())

        assert context.verify_mode == ssl.CERT_REQUIRED
        assert context.check_hostname is True

    def test_min_and_max_versions(self):
        context = load_tls_context(TLSClientSettings(min_version="1.2", max_version="1.3"))

        assert context.minimum_version == ssl.TLSVersion.TLSv1_2
        assert context.maximum_version == ssl.TLSVersion.TLSv1_3

    def test_invalid_version_rejected(self):
        with pytest.raises(ValueError, match="min_version"):
            load_tls_context(TLSClientSettings(min_version="2.0"))

    def test_insecure_skip_verify(self, auth_caplog):
        context = load_tls_context(TLSClientSettings(insecure_skip_verify=True))

        assert context.verify_mode == ssl.CERT_NONE
        assert context.check_hostname is False
        assert "verification disabled" in auth_caplog.text

    def test_cert_without_key_rejected(self):
        with pytest.raises(ValueError, match="together"):
            load_tls_context(TLSClientSettings(cert_file="/client.pem"))

    def test_missing_ca_file(self, tmp_path):
        with pytest.raises(OSError):
            load_tls_context(TLSClientSettings(ca_file=str(tmp_path / "missing.pem")))

    def test_env_bundle_used_without_ca_settings(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SSL_CERT_FILE", str(tmp_path / "missing.pem"))

        with pytest.raises(OSError):
            load_tls_context(TLSClientSettings())


class TestConfigureTLS:

    def test_installs_loaded_context(self, client_config):
        context = ssl.create_default_context()
        loader = Mock(return_value=context)
        settings = TLSClientSettings(min_version="1.2")

        configure_tls(settings, client_config, loader=loader)

        loader.assert_called_once_with(settings)
        assert client_config.tls.enable is True
        assert client_config.tls.context is context

    def test_loader_failure_wrapped(self, client_config):
        cause = ssl.SSLError("PEM lib")
        loader = Mock(side_effect=cause)

        with pytest.raises(TLSConfigLoadError) as exc_info:
            configure_tls(TLSClientSettings(), client_config, loader=loader)

        assert exc_info.value.cause is cause
        assert exc_info.value.message.startswith("error loading tls config: ")
        assert "PEM lib" in exc_info.value.message
        assert not exc_info.value.is_retryable
        assert client_config.tls.enable is False

    def test_default_loader(self, client_config):
        configure_tls(TLSClientSettings(min_version="1.2"), client_config)

        assert client_config.tls.context.minimum_version == ssl.TLSVersion.TLSv1_2
