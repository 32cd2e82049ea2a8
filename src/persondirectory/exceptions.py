"""
Exceptions raised by the person directory.

Configuration problems are reported as :py:class:`ConfigurationError` and are
never wrapped. Anything that goes wrong while talking to the broker or the
directory during a lookup surfaces as :py:class:`PersonProviderError`, with the
original exception chained as ``__cause__``.
"""


class PersonDirectoryError(Exception):
    """
    Base class for all person directory errors.
    """


class ConfigurationError(PersonDirectoryError):
    """
    Raised when the directory or one of its providers is misconfigured.
    """


class MissingCollaboratorError(ConfigurationError):
    """
    Raised when a provider is used before a required collaborator, such as the
    connection broker, has been supplied.
    """


class BrokerError(PersonDirectoryError):
    """
    Raised by a connection broker when it cannot hand out a bound connection.
    """


class PersonProviderError(PersonDirectoryError):
    """
    Raised when a person lookup fails.

    Attributes:
        identifier: The identifier that was being looked up, if known.
    """

    def __init__(self, message, identifier=None):
        super().__init__(message)
        self.identifier = identifier

    def __str__(self):
        message = super().__str__()
        if self.identifier is not None:
            return f"{message} (identifier: {self.identifier})"
        return message
