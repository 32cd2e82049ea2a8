"""
Person directory lookups backed by LDAP.
"""

__version__ = "0.1.0"

from .broker import Ldap3ConnectionBroker, LdapConnectionBroker, MockConnectionBroker
from .exceptions import *
from .ldap import LdapPersonProvider
from .person import Person
from .provider import PersonDirectory, PersonProvider
