# heliumcore

Building blocks for a lightweight D/TLS-based VPN protocol.

## Modules

- `heliumcore.codes`: the `ReturnCode` enumeration (each member has a
  `description`), `ConnState`, `ConnEvent`, `PaddingType`, `ConnectionType`,
  `MsgId` and `AuthType`, protocol constants such as `MAX_WIRE_MTU`,
  `MAX_MTU` and `PACKET_SESSION_REJECT`, the `HeError` exception, and
  `raise_for_code`, which returns `ReturnCode.SUCCESS` for a success code and
  raises `HeError` for any other known code (`ValueError` for an unknown one).
- `heliumcore.wire`: frozen dataclasses with `pack()` and `unpack(data)` for
  the wire header and the protocol messages: `WireHeader`, `PingMessage`,
  `AuthMessage`, `AuthBufferMessage`, `ConfigIPv4Message`, `DataMessage`,
  `AuthResponseMessage`, `SessionResponseMessage` and `ExtensionMessage`.
  Integers are little-endian and text fields fixed-width. Malformed input
  raises `HeError` (for example `ERR_PACKET_TOO_SMALL`, `ERR_NOT_HE_PACKET`,
  `ERR_BAD_PACKET`, `ERR_STRING_TOO_LONG`). `calculate_padded_length`
  gives the padded size of a data packet for a `PaddingType`.
- `heliumcore.plugin`: `Plugin`, a pass-through base class with
  `do_ingress(packet, capacity)` and `do_egress(packet, capacity)`;
  `PluginResult`; and `PluginChain`, which runs registered plugins over a
  `bytearray` in place. Ingress runs plugins in registration order, egress in
  reverse. A plugin returning `PluginResult.DROP` makes the chain raise
  `HeError` with `ERR_PLUGIN_DROP`; `PluginResult.FAIL` raises `ERR_FAILED`.
- `heliumcore.stats`: `StatsPlugin`, a plugin that records packet lengths in
  `RunningStats` (sum, sum of squares, count, min, max, `mean()`,
  `stddev()`, `summary()`) for each direction of a `PacketStats`, and writes
  a summary line to a stream (standard error by default) every
  `PACKET_SAMPLE_N` packets.

## Example

```python
import sys

from heliumcore.codes import HeError, ReturnCode
from heliumcore.plugin import PluginChain
from heliumcore.stats import PacketStats, StatsPlugin
from heliumcore.wire import WireHeader, calculate_padded_length
from heliumcore.codes import PaddingType

header = WireHeader(major_version=1, minor_version=1, session=0x1234)
raw = header.pack()
assert WireHeader.unpack(raw) == header

stats = PacketStats()
chain = PluginChain()
chain.register(StatsPlugin(stats, sys.stderr))

packet = bytearray(b"\x45" * 100)
try:
    chain.ingress(packet, 1500)
except HeError as err:
    if err.code is ReturnCode.ERR_PLUGIN_DROP:
        print("dropped")
    else:
        raise

print(stats.incoming.n, stats.incoming.mean())          # 1 100.0
print(calculate_padded_length(PaddingType.ROUND_450, 460))  # 900
```

## What this package does not do

It holds the protocol's codes, message layouts and plugin machinery only.
There is no connection object, no D/TLS session handling, no client or
server, no authentication flow and no command-line tool; a host
application has to supply the transport and the secure channel itself.

## Running the tests

```
pip install -e ".[test]"
pytest
```