#!/usr/bin/env python3
"""
Batched Object Creation

Logs in, locks an ADOM workspace, creates several address objects in one
request, reports which ones failed, then commits and unlocks.

    export FORTINET_HOSTNAME=fmg.example.com FORTINET_USERNAME=admin
    read -s FORTINET_PASSWORD; export FORTINET_PASSWORD
    python examples/batched_objects.py lab
"""

import logging
import os
import sys

from fortiapi import Client, ClientConfig, SessionError

ADDRESSES = [
    {"name": "honeydew", "subnet": ["10.0.0.0", "255.0.0.0"]},
    {"name": "beaker", "subnet": ["10.1.0.0", "255.255.0.0"]},
    {"name": "bunsen", "subnet": ["10.2.0.0", "255.255.0.0"]},
]


def main():
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    adom = sys.argv[1] if len(sys.argv) > 1 else "root"
    url = f"pm/config/adom/{adom}/obj/firewall/address"

    config = ClientConfig(
        hostname=os.environ.get("FORTINET_HOSTNAME"),
        username=os.environ.get("FORTINET_USERNAME"),
        password=os.environ.get("FORTINET_PASSWORD"),
        insecure=os.environ.get("FORTINET_INSECURE") == "1"
    )

    try:
        client = Client(config)
    except SessionError as e:
        print(f"✗ Login failed: {e}")
        return 1

    with client:
        if not client.workspace(adom, "lock"):
            print(f"✗ Could not lock {adom}: {client.status.error_message}")
            return 1

        ok, _, status = client.call("add", url=[url] * len(ADDRESSES), data=ADDRESSES)
        print(f"{'✓' if ok else '✗'} {status.message}")

        for key, position in sorted(status.vector.items(), key=lambda item: item[1]):
            detail = status.detail[position]
            print(f"  {key}: {detail.code} {detail.message}")

        if ok:
            client.workspace(adom, "commit")
        client.workspace(adom, "unlock")

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
