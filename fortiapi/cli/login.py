#!/usr/bin/env python3
"""
fortiapi-login: log in to a FortiManager and run a shell inside the session

Usage:
    fortiapi-login [--hostname H] [--username U] [--password P] [--insecure]
                   [--autoexec COMMAND] [--verbose] [-e ECHO]

Hostname, username and password default to FORTINET_HOSTNAME,
FORTINET_USERNAME and FORTINET_PASSWORD.

After a successful login the spawned shell (or the --autoexec command)
sees FORTINET_HOSTNAME, FORTINET_SESSION and FORTINET_ID (the next
transaction id), plus FORTINET_VERBOSE, FORTINET_ECHO and, in insecure
mode, FORTINET_INSECURE. FORTINET_USERNAME and FORTINET_PASSWORD are
removed. The session is logged out when the shell exits.

Example:
    # Log in, show the exported variables, log out again
    read -s FORTINET_PASSWORD; export FORTINET_PASSWORD
    fortiapi-login --hostname fmg.example.com --username admin --autoexec 'env | grep "^FORTINET_"'
"""

import argparse
import logging
import os
import subprocess
import sys
from typing import Dict, Mapping, Optional

import yaml

from fortiapi.cli.common import add_common_arguments, resolve_settings, setup_logging
from fortiapi.config import ClientConfig
from fortiapi.exceptions import ConfigurationError, SessionError
from fortiapi.session import Client
from fortiapi.utils.config_loader import ENV_PREFIX


def parse_args(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog='fortiapi-login',
        description='Log in to a FortiManager and spawn a shell with the session exported',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    add_common_arguments(parser)

    parser.add_argument(
        '--username',
        help='Account username (default: $FORTINET_USERNAME)'
    )
    parser.add_argument(
        '--password',
        help='Account password (default: $FORTINET_PASSWORD)'
    )
    parser.add_argument(
        '--autoexec',
        help='Command to run after login instead of an interactive shell'
    )

    return parser.parse_args(argv)


def session_environment(client: Client, environ: Mapping[str, str]) -> Dict[str, str]:
    """Environment for the spawned shell"""
    env = dict(environ)

    env.pop(f'{ENV_PREFIX}USERNAME', None)
    env.pop(f'{ENV_PREFIX}PASSWORD', None)

    env[f'{ENV_PREFIX}HOSTNAME'] = client.hostname
    env[f'{ENV_PREFIX}SESSION'] = client.session
    env[f'{ENV_PREFIX}ID'] = str(client.transaction_id)
    env[f'{ENV_PREFIX}VERBOSE'] = '1' if client.config.verbose else '0'
    env[f'{ENV_PREFIX}ECHO'] = client.config.echo.value

    if not client.secured:
        env[f'{ENV_PREFIX}INSECURE'] = '1'

    return env


def main(argv=None, environ: Optional[Mapping[str, str]] = None) -> int:
    """Main entry point"""
    args = parse_args(argv)
    logger = logging.getLogger(__name__)

    environ = os.environ if environ is None else environ

    try:
        # A session left over from an earlier login is not reused here
        settings = resolve_settings(args, environ, drop=('session', 'transaction_id'))
        setup_logging(args, settings.get('hostname'))
        config = ClientConfig.from_dict(settings)
        logger.debug(f"Resolved {config!r}")
    except (ConfigurationError, ValueError, OSError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        client = Client(config)
    except (ConfigurationError, SessionError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    interactive = args.autoexec is None

    with client:
        env = session_environment(client, environ)

        if interactive and config.verbose:
            print(f"Login successful with session {client.session}\nPlease exit this shell to log out.")

        if interactive:
            completed = subprocess.run([environ.get('SHELL', '/bin/sh')], env=env)
        else:
            completed = subprocess.run(args.autoexec, shell=True, env=env)

        if interactive and config.verbose:
            print("Logging out...")

    return completed.returncode


if __name__ == "__main__":
    sys.exit(main())
