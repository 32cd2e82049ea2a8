import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from .exceptions import ConfigurationError
from .person import Person

logger = logging.getLogger(__name__)


class PersonProvider(ABC):
    """
    Something that can look up a person by identifier.
    """

    @abstractmethod
    def get_person(self, identifier: str, options=None) -> Optional[Person]:
        """Look up a person

        Args:
            identifier (str): Account name of the person.
            options (optional): Request scoped options, passed through as is.

        Raises:
            PersonProviderError: The lookup failed.

        Returns:
            Person: The person, or None if there is no such person.
        """


class PersonDirectory(PersonProvider):
    """
    Combines several providers into one.

    Every provider is asked in turn and the attributes of each person found are
    merged. When two providers supply the same attribute, the earlier provider
    wins. Errors from any provider abort the lookup.
    """

    def __init__(self, providers: List[PersonProvider]):
        if not providers:
            raise ConfigurationError("PersonDirectory needs at least one provider")
        self.providers = list(providers)

    def get_person(self, identifier: str, options=None) -> Optional[Person]:
        attributes = {}
        found = False
        for provider in self.providers:
            person = provider.get_person(identifier, options)
            if person is None:
                continue
            found = True
            for name in person.attribute_names():
                attributes.setdefault(name, person.attribute_values(name))
        if not found:
            logger.debug(f"No provider found {identifier}")
            return None
        return Person(identifier, attributes)
