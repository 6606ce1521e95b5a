import pytest

from adclient import ADClient, ClientConfig

from .fakes import FakeDirectory

BASE_DN = "DC=example,DC=com"
SERVICE_DN = "CN=svc-reader,OU=Service,DC=example,DC=com"
ALICE_DN = "CN=Alice,OU=Users,DC=example,DC=com"


@pytest.fixture
def directory(monkeypatch):
    """A fake directory with a service account and alice, wired in place of ldap3.Connection."""
    d = FakeDirectory()
    d.add(SERVICE_DN, password="svc-pass", cn="svc-reader")
    d.add(
        ALICE_DN,
        password="secret",
        userPrincipalName="alice@example.com",
        sAMAccountName="alice",
        cn="Alice",
        mail="alice@example.com",
        memberOf=["CN=Admins,OU=Groups,DC=example,DC=com"],
        objectClass=["top", "person", "user"],
    )
    monkeypatch.setattr("adclient.session.Connection", d.connection_factory)
    return d


@pytest.fixture
def config():
    return ClientConfig(
        host="dc1.example.com",
        base_dn=BASE_DN,
        bind_dn=SERVICE_DN,
        bind_password="svc-pass",
        attributes=("userPrincipalName", "sAMAccountName", "cn", "mail", "memberOf"),
    )


@pytest.fixture
def client(directory, config):
    c = ADClient(config)
    yield c
    c.close()
