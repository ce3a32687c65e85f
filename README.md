# resolink

An asyncio client for the Resonite Link websocket API, together with a data
model for slots, components and their members that converts to and from the
JSON the API speaks.

## Installation

```
pip install resolink
```

## Reading the world root from the command line

Point the bundled command at the websocket address Resonite gives you:

```
resolink-read-root ws://localhost:12345
```

It connects, asks for the `Root` slot three levels deep with component data
included, and prints the response as indented JSON. Without an address it
prints a short usage line; if the connection or the request fails it prints
the error to standard error and exits with status 1.

## Using the client

```python
import asyncio

from resolink.client import Client, ClientError
from resolink.messages import GetSlot
from resolink.responses import SlotData


async def main() -> None:
    try:
        async with await Client.connect("ws://localhost:12345") as client:
            response = await client.send(
                GetSlot(slot_id="Root", depth=1, include_component_data=False)
            )
    except ClientError as exc:
        print("request failed:", exc)
        return

    if response.success and isinstance(response.kind, SlotData) and response.kind.data:
        slot = response.kind.data
        print(slot.name.value, [child.name.value for child in slot.children])
    else:
        print("error:", response.error_info)


asyncio.run(main())
```

`Client.connect(address, id_prefix=None)` opens the websocket. `send()` wraps
the message with a unique id from `resolink.ids.IdGenerator`
(`RS_REPL_<prefix>_<n>`, with a random hexadecimal prefix unless `id_prefix`
is given) and waits for the reply carrying that id, so several requests can be
outstanding at once. `is_closed()` reports whether the client was closed or
the connection was lost, and `close()` (or leaving an `async with` block)
closes the connection; requests still waiting then fail with
`ConnectionClosed`.

A `success: false` reply is returned like any other; check `response.success`
and `response.error_info` yourself.

## Messages

`resolink.messages` provides `GetSlot`, `AddSlot`, `UpdateSlot`, `RemoveSlot`,
`GetComponent`, `AddComponent`, `UpdateComponent` and `RemoveComponent`, plus
`MessageWrapper` and the functions `message_to_json` and `message_from_json`.

Replies are `resolink.responses.Response` objects whose `kind` is a
`GenericResult`, `SlotData` (with `depth` and an optional `Slot`) or
`ComponentData` (with an optional `Component`). `FallbackResponse` reads just
the common fields of a reply.

## Data model

`resolink.data_model` holds `Slot`, `Component`, `Member` (tagged by
`MemberType`), `Reference`, `SyncList`, `SyncObject`, `Enum`, `Empty`,
`Field`, `ArrayField`, and the vector and colour types `Int2`, `Int3`, `Int4`,
`Float2`, `Float3`, `Float4`, `FloatQ`, `Color`, `ColorX` and `Color32`.
These convert with `to_json()` and `from_json()`; a `Field` converts through
`field_to_json(field, kind)` and `field_from_json(data, kind)`, where `kind` is
a `MemberType` naming its value type. Integer values are range-checked for
their width and single-precision values are rounded to single precision.
`Slot.is_root_slot()` tells whether a slot is named `Root`.

Non-finite floats travel as the strings `"NaN"`, `"Infinity"` and
`"-Infinity"`, handled by `resolink.floats.encode_float` and `decode_float`;
`to_single` rounds a number to single precision.

## Errors

All client failures derive from `resolink.client.ClientError`:
`FailureToConnect`, `ConnectionClosed`, `MessageRenderingError` and
`MessageParsingError`. Malformed data passed to the `from_json` methods raises
`ValueError`.

## What it does not do

The package is a client only: it does not run a server of its own, and it
offers no gRPC or other bridge to the link protocol. Only the member types
listed in `MemberType` are understood.

## Running the tests

```
pip install -e ".[test]"
pytest
```