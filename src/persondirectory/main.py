import argparse
import json
import logging
import logging.config
import os
import sys

from .broker import Ldap3ConnectionBroker, MockConnectionBroker
from .config import Config, load_config
from .exceptions import PersonDirectoryError, PersonProviderError
from .ldap import LdapPersonProvider
from .prometheus import write_textfile

APP_NAME = "persondirectory"
logger = logging.getLogger(APP_NAME)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Look up people in an LDAP directory")
    parser.add_argument('--config', type=str, required=True, help="Path to the configuration file")
    parser.add_argument('identifiers', nargs='+', help="Account names to look up")
    return parser.parse_args(argv)


def init_broker(config: Config):
    if config.mockup_enabled:
        logger.debug("Initialized MockConnectionBroker")
        return MockConnectionBroker(file=os.path.abspath(config.mockup.get('file', './ldap_entries.json')))
    logger.debug("Initialized Ldap3ConnectionBroker")
    return Ldap3ConnectionBroker(config.servers)


def lookup(provider, identifier, out=None):
    """Look up one identifier and print the result as a JSON line

    Returns:
        bool: False if the lookup failed.
    """
    out = out or sys.stdout
    try:
        person = provider.get_person(identifier, None)
    except (PersonProviderError, ValueError) as e:
        logger.error(f"Lookup of {identifier} failed: {e}")
        return False
    if person is None:
        result = {"uid": identifier, "found": False}
    else:
        result = {"uid": person.uid, "attributes": person.to_dict()}
    out.write(json.dumps(result, ensure_ascii=False) + "\n")
    return True


def main(argv=None):
    args = parse_args(argv)
    try:
        config = load_config(args.config)
    except (OSError, PersonDirectoryError) as e:
        logger.error(f"Cannot load configuration {args.config}: {e}")
        return 1
    logging.config.dictConfig(config.logging or {'version': 1, 'incremental': True})

    provider = LdapPersonProvider(init_broker(config), config.provider)
    ok = all([lookup(provider, identifier) for identifier in args.identifiers])

    if config.prometheus_enabled:
        write_textfile(provider, os.path.abspath(config.prometheus.get('textfile', './persondirectory.prom')))
    return 0 if ok else 1


def run():
    sys.exit(main())


if __name__ == '__main__':
    run()
