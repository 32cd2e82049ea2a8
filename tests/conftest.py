import pytest

from persondirectory.broker import MockConnectionBroker
from persondirectory.config import ProviderConfig

@pytest.fixture(scope='session')
def basic_ldap_params():
    """Bind parameters for the mock directory."""
    return {
        "user": "cn=admin,dc=example,dc=com",
        "password": "secret",
        "base_dn": "ou=people,dc=example,dc=com",
    }

@pytest.fixture(name="ldap_entries")
def ldap_entries_fixture(basic_ldap_params):
    return {
        basic_ldap_params["user"]: {'objectClass': 'person', 'userPassword': basic_ldap_params["password"], 'sn': 'Chef'},
        "dc=example,dc=com": {'objectClass': 'domain', 'dc': 'example'},
        basic_ldap_params["base_dn"]: {'objectClass': 'organizationalUnit', 'ou': 'people'},
        "uid=tUser,ou=people,dc=example,dc=com": {
            'objectClass': 'inetOrgPerson',
            'uid': 'tUser',
            'firstname': 'Tester',
            'lastname': 'User',
        },
        "uid=mValue,ou=people,dc=example,dc=com": {
            'objectClass': 'inetOrgPerson',
            'uid': 'mValue',
            'firstname': 'Multi',
            'mail': ['multi@example.com', 'mv@example.com'],
        },
    }

@pytest.fixture(name="mock_broker")
def mock_broker_fixture(ldap_entries):
    return MockConnectionBroker(entries=ldap_entries)

@pytest.fixture(name="provider_config")
def provider_config_fixture(basic_ldap_params):
    return ProviderConfig(base_dn=basic_ldap_params["base_dn"],
                          bind_dn=basic_ldap_params["user"],
                          bind_password=basic_ldap_params["password"],
                          attributes=['firstname', 'lastname'])
