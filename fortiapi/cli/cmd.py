#!/usr/bin/env python3
"""
fortiapi-cmd: run one URL-based transaction against a FortiManager

Usage:
    fortiapi-cmd [--hostname H] [--session S] [--id N] -m METHOD
                 (-u URL | -p PARAMS) [-d DATA] [-e ECHO] [--status]

The hostname, session, starting transaction id, verbosity, echo mode and
insecure flag default to FORTINET_HOSTNAME, FORTINET_SESSION, FORTINET_ID,
FORTINET_VERBOSE, FORTINET_ECHO and FORTINET_INSECURE, as exported by
fortiapi-login.

URLs may be a plain string or JSON. Params and data must be JSON. Any of
them may be arrays, as long as every array has the same length.

Examples:
    # Get the system status, showing request and response
    fortiapi-cmd -m get -u sys/status -e all

    # Same, with the URL inside a params block
    fortiapi-cmd -m get -p '{"url": "sys/status"}' -e all

    # Several URLs at once, with the API status structure
    fortiapi-cmd -m get -u '["/cli/global/system/status", "/cli/global/system/performance"]' --status

    # Create an address object
    fortiapi-cmd -m set -u pm/config/adom/lab/obj/firewall/address \\
        -d '{"name": "honeydew", "subnet": ["10.0.0.0", "255.0.0.0"]}'

    # Lock, commit and unlock an ADOM workspace
    fortiapi-cmd -m exec -u pm/config/adom/lab/_workspace/lock
    fortiapi-cmd -m exec -u pm/config/adom/lab/_workspace/commit
    fortiapi-cmd -m exec -u pm/config/adom/lab/_workspace/unlock
"""

import argparse
import json
import logging
import sys
from typing import Any, Mapping, Optional

import yaml

from fortiapi.cli.common import add_common_arguments, resolve_settings, setup_logging
from fortiapi.communication.echo import pretty_json
from fortiapi.config import ClientConfig
from fortiapi.exceptions import ConfigurationError, SessionError
from fortiapi.session import Client


def parse_args(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog='fortiapi-cmd',
        description='Execute a FortiManager JSON API transaction',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    add_common_arguments(parser)

    parser.add_argument(
        '--session',
        help='Session ID (default: $FORTINET_SESSION)'
    )
    parser.add_argument(
        '--id',
        type=int,
        help='Transaction ID to begin with (default: $FORTINET_ID or 1)'
    )
    parser.add_argument(
        '-m', '--method',
        help='JSON API method: get, set, add, update, delete, exec, ...'
    )
    parser.add_argument(
        '-u', '--url',
        help='URL string, or JSON array of URLs'
    )
    parser.add_argument(
        '-p', '--params',
        help='JSON params block or array of params blocks'
    )
    parser.add_argument(
        '-d', '--data',
        help='JSON data block or array of data blocks'
    )
    parser.add_argument(
        '--status',
        action='store_true',
        help='Print the API status structure'
    )

    return parser.parse_args(argv)


def decode_argument(name: str, value: Optional[str]) -> Any:
    """
    Decode a url/params/data argument.

    URLs that are not valid JSON are used as plain strings; params and data
    must be valid JSON.
    """
    if value is None:
        return None

    try:
        return json.loads(value)
    except ValueError:
        if name == 'url':
            return value
        raise ConfigurationError(f"JSON parse failed for supplied {name} block") from None


def main(argv=None, environ: Optional[Mapping[str, str]] = None) -> int:
    """Main entry point"""
    args = parse_args(argv)
    logger = logging.getLogger(__name__)

    try:
        settings = resolve_settings(args, environ, drop=('username', 'password'))
        setup_logging(args, settings.get('hostname'))

        if not settings.get('hostname') or not settings.get('session') or (
            args.url is None and args.params is None
        ):
            raise ConfigurationError("Hostname, session ID and URL and/or params are required")

        url = decode_argument('url', args.url)
        params = decode_argument('params', args.params)
        data = decode_argument('data', args.data)

        config = ClientConfig.from_dict(settings)
        logger.debug(f"Resolved {config!r}")

    except (ConfigurationError, ValueError, OSError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        with Client(config) as client:
            ok, _, status = client.call(args.method, url=url, params=params, data=data)

            if args.status:
                print("# Fortinet API status:\n" + pretty_json(status.to_dict()))

            if not ok:
                print(f"Error: {status.error_message}", file=sys.stderr)
                return 1

    except (ConfigurationError, SessionError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
