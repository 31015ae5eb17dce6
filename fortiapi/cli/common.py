"""
Shared helpers for the fortiapi command-line tools.

Environment and profile handling lives here so that the library itself
only ever sees a finished ClientConfig.
"""

import argparse
import logging
import os
import sys
from typing import Any, Dict, Mapping, Optional

from fortiapi.logging import configure_logging, get_logger, PACKAGE_LOGGER
from fortiapi.utils.config_loader import ConfigLoader, ENV_PREFIX, parse_flag

INSECURE_WARNING = (
    "Warning: SSL/TLS override was not explicitly requested by option, "
    "but has been inherited from a prior enabled environment variable."
)


def add_common_arguments(parser: argparse.ArgumentParser):
    """Options shared by every tool"""
    parser.add_argument(
        '--hostname',
        help=f'Appliance host name or IP address (default: ${ENV_PREFIX}HOSTNAME)'
    )
    parser.add_argument(
        '--insecure',
        action='store_true',
        default=None,
        help=f'Disable TLS host/certificate checks (default: ${ENV_PREFIX}INSECURE)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        default=None,
        help='Display every JSON request and response'
    )
    parser.add_argument(
        '-e', '--echo',
        choices=['all', 'request', 'response', 'result', 'none', 'off', 'unset'],
        help='Override verbosity for requests and/or responses'
    )
    parser.add_argument(
        '--config',
        help='YAML connection profile; environment and options override it'
    )
    parser.add_argument(
        '--log-config',
        help='YAML logging configuration (logging.config.dictConfig format)'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )


def setup_logging(args, hostname: Optional[str] = None):
    """
    Configure logging.

    A --log-config file takes over completely. Otherwise fortiapi log
    entries go to stderr as JSON tagged with the appliance hostname.
    """
    level = logging.DEBUG if args.debug else logging.WARNING

    if args.log_config:
        configure_logging(args.log_config, default_level=level)
    else:
        get_logger(PACKAGE_LOGGER, hostname=hostname, level=level)


def resolve_settings(
    args,
    environ: Optional[Mapping[str, str]] = None,
    drop: tuple = ()
) -> Dict[str, Any]:
    """
    Merge profile, environment and command-line settings.

    Later sources win: profile < environment < options. An insecure mode
    inherited only from the environment prints a warning.

    Args:
        args: Parsed arguments
        environ: Environment mapping (os.environ if omitted)
        drop: Settings to discard from profile and environment

    Returns:
        Settings dictionary accepted by ClientConfig.from_dict
    """
    environ = os.environ if environ is None else environ
    settings = ConfigLoader.load_with_env_override(args.config, environ=environ)

    for key in drop:
        settings.pop(key, None)

    if not args.insecure and parse_flag(environ.get(f'{ENV_PREFIX}INSECURE')):
        print(INSECURE_WARNING, file=sys.stderr)
        settings['insecure'] = True

    for name in ('hostname', 'username', 'password', 'session', 'insecure', 'verbose', 'echo'):
        value = getattr(args, name, None)
        if value is not None:
            settings[name] = value

    if getattr(args, 'id', None) is not None:
        settings['transaction_id'] = args.id

    return settings
