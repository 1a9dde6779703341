"""Packet plugins and the chain that runs them on ingress and egress.

A plugin sees the packet as a ``bytearray`` and may change it in place,
including its length, as long as it stays within ``capacity`` bytes.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator

from .codes import HeError, ReturnCode


class PluginResult(enum.IntEnum):
    """What a plugin tells the chain after looking at a packet."""

    SUCCESS = 0
    FAIL = -1
    DROP = -2


class Plugin:
    """Base plugin: both directions pass packets through unchanged."""

    def do_ingress(self, packet: bytearray, capacity: int) -> PluginResult:
        """Inspect or rewrite a packet arriving from the outside."""
        return PluginResult.SUCCESS

    def do_egress(self, packet: bytearray, capacity: int) -> PluginResult:
        """Inspect or rewrite a packet leaving for the outside."""
        return PluginResult.SUCCESS


def _run(hook, packet: bytearray, capacity: int) -> None:
    if hook is None:
        return
    result = hook(packet, capacity)
    if result == PluginResult.FAIL:
        raise HeError(ReturnCode.ERR_FAILED, "plugin failed to process the packet")
    if result == PluginResult.DROP:
        raise HeError(ReturnCode.ERR_PLUGIN_DROP)


class PluginChain:
    """An ordered set of plugins.

    Ingress runs the plugins in registration order; egress runs them in
    reverse, so the last plugin registered is the first to see outgoing data.
    """

    def __init__(self):
        self._plugins: list = []

    def register(self, plugin) -> None:
        """Append a plugin to the end of the chain."""
        if plugin is None:
            raise HeError(ReturnCode.ERR_NULL_POINTER, "plugin must not be None")
        self._plugins.append(plugin)

    def ingress(self, packet: bytearray, capacity: int) -> None:
        """Pass a packet through every plugin's ingress hook.

        Raises HeError with ERR_PLUGIN_DROP if a plugin drops the packet, or
        ERR_FAILED if a plugin fails; later plugins are then not run.
        """
        for plugin in self._plugins:
            _run(getattr(plugin, "do_ingress", None), packet, capacity)

    def egress(self, packet: bytearray, capacity: int) -> None:
        """Pass a packet through every plugin's egress hook, newest first.

        Raises HeError with ERR_PLUGIN_DROP or ERR_FAILED as ingress does.
        """
        for plugin in reversed(self._plugins):
            _run(getattr(plugin, "do_egress", None), packet, capacity)

    def __len__(self) -> int:
        return len(self._plugins)

    def __iter__(self) -> Iterator:
        return iter(self._plugins)