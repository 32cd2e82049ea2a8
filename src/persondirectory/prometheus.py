"""
This module provides a custom Prometheus collector for person lookups.

The `PersonProviderCollector` reads the lookup counters that
`LdapPersonProvider` keeps and exposes them in a format Prometheus can scrape,
or that can be written to a node_exporter textfile with `write_textfile`.
"""
import logging

from prometheus_client import CollectorRegistry, write_to_textfile
from prometheus_client.core import CounterMetricFamily, InfoMetricFamily
from prometheus_client.registry import Collector

from .ldap import OUTCOME_ERROR, OUTCOME_FOUND, OUTCOME_NOT_FOUND

# Create a logger for this module
logger = logging.getLogger(__name__)

outcomes = (OUTCOME_FOUND, OUTCOME_NOT_FOUND, OUTCOME_ERROR)


class PersonProviderCollector(Collector):
    """
    Custom Prometheus collector for the lookups made by a person provider.
    """

    def __init__(self, provider, name="ldap"):
        logger.debug("Initializing PersonProviderCollector")
        self.provider = provider
        self.name = name

    def collect(self):
        logger.debug(f"Collecting lookup metrics for provider {self.name}")
        yield InfoMetricFamily(name='persondirectory_collector',
                               documentation='Information about the person directory collector',
                               value={'status': 'running', 'provider': self.name})

        c = CounterMetricFamily(name='persondirectory_lookups',
                                documentation='Person lookups by outcome',
                                labels=['provider', 'outcome'])
        for outcome in outcomes:
            c.add_metric([self.name, outcome], self.provider.lookups.get(outcome, 0))
        yield c


def write_textfile(provider, path, name="ldap"):
    """Write the lookup metrics of a provider to a textfile

    Args:
        provider (LdapPersonProvider): Provider to report on.
        path (str): Target file, replaced atomically.
        name (str, optional): Value of the provider label. Defaults to "ldap".
    """
    registry = CollectorRegistry()
    registry.register(PersonProviderCollector(provider, name=name))
    write_to_textfile(path, registry)
    logger.debug(f"Wrote lookup metrics to {path}")
