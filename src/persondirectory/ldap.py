import logging
from collections import Counter
from typing import Optional

from ldap3.core.exceptions import LDAPException
from ldap3.utils.conv import escape_filter_chars

from .config import ProviderConfig
from .exceptions import BrokerError, MissingCollaboratorError, PersonProviderError
from .person import Person
from .provider import PersonProvider

# Create a logger for this module
logger = logging.getLogger(__name__)

OUTCOME_FOUND = "found"
OUTCOME_NOT_FOUND = "not_found"
OUTCOME_ERROR = "error"

# success, sizeLimitExceeded
SEARCH_OK_RESULTS = (0, 4)


class LdapPersonProvider(PersonProvider):
    """
    Looks up people in an LDAP directory, using connections from a broker.
    """

    def __init__(self, broker=None, config: Optional[ProviderConfig] = None):
        """Create the provider

        Args:
            broker (LdapConnectionBroker, optional): Supplies bound connections.
                Must be set before the first lookup. Defaults to None.
            config (ProviderConfig, optional): Search settings. Defaults to None.
        """
        self.broker = broker
        self.config = config if config is not None else ProviderConfig()
        self.lookups = Counter()

    def get_person(self, identifier: str, options=None) -> Optional[Person]:
        """Look up a person in the directory

        Only the first matching entry is used. Connections are always handed
        back to the broker, whatever the outcome.

        Args:
            identifier (str): Account name, substituted into the search filter.
            options (optional): Request scoped options. Not used by this provider.

        Raises:
            MissingCollaboratorError: No broker has been set.
            PersonProviderError: The broker or the directory failed, or the
                entry could not be converted.

        Returns:
            Person: The person, or None if no entry matched.
        """
        if self.broker is None:
            raise MissingCollaboratorError("LdapPersonProvider has no connection broker")
        if not identifier:
            raise ValueError("identifier must not be empty")
        logger.debug(f"Looking up {identifier} (options: {options})")

        try:
            person = self._lookup(identifier)
        except PersonProviderError:
            self.lookups[OUTCOME_ERROR] += 1
            raise
        self.lookups[OUTCOME_FOUND if person is not None else OUTCOME_NOT_FOUND] += 1
        return person

    def _lookup(self, identifier):
        config = self.config
        try:
            connection = self.broker.get_bound_connection(config.connection,
                                                          config.bind_dn,
                                                          config.bind_password)
        except (BrokerError, LDAPException) as e:
            logger.exception("Cannot get a bound LDAP connection")
            raise PersonProviderError("Cannot get a bound LDAP connection", identifier) from e

        try:
            search_filter = config.filter.format(identifier=escape_filter_chars(identifier))
            logger.debug(f"Searching {config.base_dn} with {search_filter} for {config.attributes}")
            try:
                found = connection.search(search_base=config.base_dn,
                                          search_filter=search_filter,
                                          search_scope=config.search_scope,
                                          attributes=config.attributes,
                                          types_only=False,
                                          size_limit=config.constraints.size_limit,
                                          time_limit=config.constraints.time_limit)
                entries = connection.entries
            except LDAPException as e:
                logger.exception("LDAP search failed")
                raise PersonProviderError("Error searching LDAP", identifier) from e
            # connections opened without raise_exceptions report failures only in the result
            if not found and (connection.result or {}).get('result') not in SEARCH_OK_RESULTS:
                logger.error(f"LDAP search failed: {connection.result}")
                raise PersonProviderError(f"Error searching LDAP: {connection.result}", identifier)

            if not entries:
                logger.debug(f"No LDAP entry for {identifier}")
                return None
            if len(entries) > 1:
                logger.warning(f"{len(entries)} LDAP entries match {identifier}, using {entries[0].entry_dn}")
            return self._to_person(identifier, entries[0])
        finally:
            self.broker.release_connection(connection)

    def _to_person(self, identifier, entry) -> Person:
        """Convert an ldap3 entry into a Person

        Args:
            identifier (str): Identifier the entry was found for.
            entry (ldap3.Entry): The directory entry.

        Raises:
            PersonProviderError: The entry holds values that cannot be decoded.

        Returns:
            Person: The person.
        """
        attributes = {}
        try:
            for key, values in entry.entry_attributes_as_dict.items():
                name = self.config.attribute_map.get(key, key)
                attributes[name] = [self._decode(val) for val in values]
        except (UnicodeDecodeError, AttributeError, TypeError) as e:
            logger.exception("LDAP entry %s invalid", entry.entry_dn)
            raise PersonProviderError("LDAP entry invalid", identifier) from e
        logger.debug(f"LDAP entry {entry.entry_dn} has attributes {sorted(attributes)}")
        return Person(identifier, attributes)

    def _decode(self, val) -> str:
        ### Decode bytes to utf-8 string
        if isinstance(val, bytes):
            return val.decode('utf-8')
        ### Keep numbers and dates as their string form
        return val if isinstance(val, str) else str(val)
