"""
Connection brokers hand out bound ldap3 connections to providers.

A provider only ever borrows a connection for the duration of one lookup and
gives it back with :py:meth:`LdapConnectionBroker.release_connection`.
"""
import json
import logging
import os
import ssl
from abc import ABC, abstractmethod

from ldap3 import MOCK_SYNC, NONE, SYNC, Connection, Server, Tls
from ldap3.core.exceptions import LDAPException

from .exceptions import BrokerError

# Create a logger for this module
logger = logging.getLogger(__name__)


class LdapConnectionBroker(ABC):
    """
    Supplies bound directory connections.
    """

    @abstractmethod
    def get_bound_connection(self, name, bind_dn, password) -> Connection:
        """Get a connection that is already bound

        Args:
            name (str): Name of the configured connection to use.
            bind_dn (str): DN to bind as, None for an anonymous bind.
            password (str): Bind password.

        Raises:
            BrokerError: No bound connection could be established.

        Returns:
            ldap3.Connection: The bound connection.
        """

    def release_connection(self, connection: Connection):
        """Give back a connection obtained from get_bound_connection

        Args:
            connection (ldap3.Connection): The connection to release.
        """
        try:
            connection.unbind()
            logger.debug("LDAP connection released")
        except LDAPException:
            logger.exception("Error while releasing LDAP connection")


class Ldap3ConnectionBroker(LdapConnectionBroker):
    """
    Broker that opens a new synchronous connection to a real directory server
    for every request.
    """

    def __init__(self, servers):
        """Create the broker

        Args:
            servers (dict): Connection name to LdapServerConfig.
        """
        self.servers = dict(servers)

    def get_bound_connection(self, name, bind_dn, password) -> Connection:
        server_config = self.servers.get(name)
        if server_config is None:
            raise BrokerError(f"No LDAP connection named {name!r} is configured")
        try:
            server = self._server(server_config)
            logger.debug(f"Opening LDAP connection to {server.host} for {bind_dn}")
            return Connection(server=server,
                              user=bind_dn,
                              password=password,
                              auto_bind=True,
                              client_strategy=SYNC,
                              receive_timeout=server_config.receive_timeout,
                              raise_exceptions=True)
        except LDAPException as e:
            logger.exception("Failed to connect to LDAP server %s", server_config.host)
            raise BrokerError(f"Cannot bind to LDAP server {server_config.host}: {e}") from e

    def _server(self, server_config) -> Server:
        if server_config.ca_cert is not None:
            tls = Tls(ca_certs_data=server_config.ca_cert,
                      validate=ssl.CERT_REQUIRED,
                      version=ssl.PROTOCOL_TLS_CLIENT)
            return Server(host=server_config.host,
                          port=server_config.port,
                          use_ssl=True,
                          tls=tls,
                          connect_timeout=server_config.connect_timeout)
        return Server(host=server_config.host,
                      port=server_config.port,
                      use_ssl=server_config.use_ssl,
                      connect_timeout=server_config.connect_timeout)


class MockConnectionBroker(LdapConnectionBroker):
    """
    Broker backed by ldap3's MOCK_SYNC strategy, for running without a
    directory server.

    Entries are loaded into the mock server once, on the first request. Bind
    credentials are checked against the ``userPassword`` of the loaded entries.
    """

    def __init__(self, entries=None, file=None, host="mock_ldap_server"):
        """Create the broker

        Args:
            entries (dict, optional): DN to attribute dictionary. Defaults to None.
            file (str, optional): JSON file in the layout written by
                ldap3's ``Connection.response_to_json()``. Defaults to None.
            host (str, optional): Name of the mock server.
        """
        self.entries = dict(entries or {})
        self.file = file
        self._server = Server(host, get_info=NONE)
        self._loaded = False

    def get_bound_connection(self, name, bind_dn, password) -> Connection:
        connection = Connection(self._server,
                                user=bind_dn,
                                password=password,
                                client_strategy=MOCK_SYNC,
                                raise_exceptions=True)
        try:
            if not self._loaded:
                self._load(connection)
            if not connection.bind():
                raise BrokerError(f"Cannot bind to mock LDAP server as {bind_dn}")
        except LDAPException as e:
            logger.exception("Failed to bind to mock LDAP server")
            raise BrokerError(f"Cannot bind to mock LDAP server as {bind_dn}: {e}") from e
        logger.debug(f"Mock LDAP connection bound for {bind_dn} ({name})")
        return connection

    def _load(self, connection):
        entries = dict(self.entries)
        if self.file:
            entries.update(self._read_file(self.file))
        for dn, attributes in entries.items():
            connection.strategy.add_entry(dn, attributes)
        self._loaded = True
        logger.debug(f"Loaded {len(entries)} entries into mock LDAP server")

    def _read_file(self, filepath):
        filepath = os.path.abspath(filepath)
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                definition = json.load(f)
            return {
                entry['dn']: entry.get('attributes', entry.get('raw', {}))
                for entry in definition['entries']
            }
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise BrokerError(f"Cannot read mock LDAP entries from {filepath}: {e}") from e
