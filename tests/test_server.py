import logging

import pytest

from tourney import server

SSL_ENV = ("SSL_CERT_FILE", "SSL_KEY_FILE", "SSL_CA_FILE", "SSL_KEY_PASSWORD")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in SSL_ENV + ("APP_PORT", "PORT", "APP_HOST", "UVICORN_LOG_LEVEL", "DATABASE_URL"):
        monkeypatch.delenv(key, raising=False)


def test_ssl_disabled_without_files():
    assert server._ssl_kwargs() == {}


@pytest.mark.parametrize("present", ["SSL_CERT_FILE", "SSL_KEY_FILE"])
def test_partial_ssl_config_is_ignored(monkeypatch, caplog, present):
    monkeypatch.setenv(present, "/etc/tourney/tls.pem")
    with caplog.at_level(logging.WARNING, logger=server.__name__):
        assert server._ssl_kwargs() == {}
    assert "must both be set" in caplog.text


def test_full_ssl_config(monkeypatch):
    monkeypatch.setenv("SSL_CERT_FILE", "cert.pem")
    monkeypatch.setenv("SSL_KEY_FILE", "key.pem")
    monkeypatch.setenv("SSL_CA_FILE", "ca.pem")
    monkeypatch.setenv("SSL_KEY_PASSWORD", "secret")
    assert server._ssl_kwargs() == {
        "ssl_certfile": "cert.pem",
        "ssl_keyfile": "key.pem",
        "ssl_ca_certs": "ca.pem",
        "ssl_keyfile_password": "secret",
    }


def test_port_from_env(monkeypatch, caplog):
    assert server._port_from_env() == server.DEFAULT_PORT
    monkeypatch.setenv("PORT", "9100")
    assert server._port_from_env() == 9100
    monkeypatch.setenv("APP_PORT", "eighty")
    with caplog.at_level(logging.WARNING, logger=server.__name__):
        assert server._port_from_env() == 9100
    assert "APP_PORT=eighty" in caplog.text


def test_main_passes_ssl_options_to_uvicorn(monkeypatch):
    calls = []
    monkeypatch.setattr(server.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setenv("SSL_CERT_FILE", "cert.pem")
    monkeypatch.setenv("SSL_KEY_FILE", "key.pem")
    monkeypatch.setenv("APP_PORT", "8443")

    server.main()

    app, kwargs = calls[0]
    assert app == server.APP_MODULE
    assert kwargs["port"] == 8443
    assert kwargs["ssl_certfile"] == "cert.pem"
    assert kwargs["ssl_keyfile"] == "key.pem"
    assert "ssl_ca_certs" not in kwargs
