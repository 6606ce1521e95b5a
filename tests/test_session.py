import ssl
from dataclasses import replace

import pytest

from adclient import ADConnectionError
from adclient.session import Session


@pytest.fixture
def recorded(monkeypatch):
    """Capture the keyword arguments ldap3.Server and ldap3.Tls are built with."""
    calls = {"server": [], "tls": []}

    def fake_tls(**kwargs):
        calls["tls"].append(kwargs)
        return ("tls", kwargs)

    def fake_server(**kwargs):
        calls["server"].append(kwargs)
        return ("server", kwargs)

    monkeypatch.setattr("adclient.session.Tls", fake_tls)
    monkeypatch.setattr("adclient.session.Server", fake_server)
    return calls


def test_starttls_by_default(directory, config):
    s = Session(config)
    conn = s.ensure_connected()
    assert conn.tls_started
    assert directory.opens == 1
    assert s.connected


def test_skip_tls_connects_plain(directory, config):
    s = Session(replace(config, skip_tls=True))
    conn = s.ensure_connected()
    assert not conn.tls_started


def test_ldaps_skips_starttls(directory, config, recorded):
    s = Session(replace(config, use_ssl=True, port=636))
    conn = s.ensure_connected()
    assert not conn.tls_started
    assert recorded["server"][0]["use_ssl"] is True
    assert recorded["server"][0]["port"] == 636


def test_tls_options(directory, config, recorded):
    cfg = replace(
        config,
        use_ssl=True,
        server_name="dc1.example.com",
        client_cert_file="/etc/adclient/client.pem",
        client_key_file="/etc/adclient/client.key",
        ca_certs_file="/etc/adclient/ca.pem",
    )
    Session(cfg).ensure_connected()
    tls = recorded["tls"][0]
    assert tls["validate"] == ssl.CERT_REQUIRED
    assert tls["valid_names"] == ["dc1.example.com"]
    assert tls["sni"] == "dc1.example.com"
    assert tls["local_certificate_file"] == "/etc/adclient/client.pem"
    assert tls["local_private_key_file"] == "/etc/adclient/client.key"
    assert tls["ca_certs_file"] == "/etc/adclient/ca.pem"


def test_insecure_skip_verify(directory, config, recorded):
    Session(replace(config, use_ssl=True, insecure_skip_verify=True)).ensure_connected()
    tls = recorded["tls"][0]
    assert tls["validate"] == ssl.CERT_NONE
    assert "local_certificate_file" not in tls


def test_ensure_connected_reuses_live_connection(directory, config):
    s = Session(config)
    first = s.ensure_connected()
    second = s.ensure_connected()
    assert first is second
    assert directory.opens == 1


def test_reconnects_when_connection_closed(directory, config):
    s = Session(config)
    first = s.ensure_connected()
    first.closed = True
    second = s.ensure_connected()
    assert second is not first
    assert directory.opens == 2


def test_open_failure_raises_connection_error(directory, config):
    directory.fail_open = True
    s = Session(config)
    with pytest.raises(ADConnectionError):
        s.ensure_connected()
    assert not s.connected


def test_refused_starttls_raises_and_discards(directory, config):
    directory.starttls_ok = False
    s = Session(config)
    with pytest.raises(ADConnectionError) as exc:
        s.ensure_connected()
    assert exc.value.code == 2
    assert not s.connected
    assert directory.connections[0].closed


def test_close_is_idempotent(directory, config):
    s = Session(config)
    s.close()
    conn = s.ensure_connected()
    s.close()
    s.close()
    assert conn.unbinds == 1
    assert not s.connected


def test_connection_property_requires_live_session(directory, config):
    with pytest.raises(ADConnectionError):
        Session(config).connection


def test_missing_ca_file_raises_connection_error(directory, config):
    s = Session(replace(config, ca_certs_file="/nonexistent/adclient-ca.pem"))
    with pytest.raises(ADConnectionError):
        s.ensure_connected()
    assert directory.connections == []
    assert not s.connected
