"""Command that connects to a link server and prints the root of the world."""

import asyncio
import json
import logging
import sys

from resolink.client import Client, ClientError
from resolink.messages import GetSlot


async def _read_root(address):
    client = await Client.connect(address)
    try:
        return await client.send(
            GetSlot(slot_id="Root", depth=3, include_component_data=True)
        )
    finally:
        await client.close()


def main(argv=None):
    """Fetch the root slot three levels deep from the server at the given URL."""
    logging.basicConfig()
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("The first argument must be the url to connect to.")
        return 0
    try:
        response = asyncio.run(_read_root(args[0]))
    except ClientError as exc:
        print(exc, file=sys.stderr)
        return 1
    print(json.dumps(response.to_json(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())