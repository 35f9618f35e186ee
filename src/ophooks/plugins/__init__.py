"""Schema builder plugins for operation hooks.

Usage:
    from ophooks.plugins import operation_hooks_plugin
    from ophooks.schema import build_schema

    schema = build_schema(TYPE_DEFS, RESOLVERS, plugins=[operation_hooks_plugin, my_plugin])

Plugins that register operation hooks do so from an ``init`` hook:

    def my_plugin(builder, options):
        builder.hook("init", lambda build: build.add_operation_hook(my_generator))
"""

from ophooks.config import BuildOptions
from ophooks.plugins.core import operation_hooks_core_plugin
from ophooks.plugins.messages import (
    Message,
    add_message,
    get_messages,
    operation_messages_plugin,
)
from ophooks.plugins.preflight import operation_messages_preflight_plugin
from ophooks.schema.builder import SchemaBuilder


def operation_hooks_plugin(builder: SchemaBuilder, options: BuildOptions) -> None:
    """Preset: pre-flight mutations, the core hook engine, and operation messages.

    The pre-flight plugin comes first so its ``preflight`` argument is
    added before the core plugin wraps the resolver.
    """
    operation_messages_preflight_plugin(builder, options)
    operation_hooks_core_plugin(builder, options)
    operation_messages_plugin(builder, options)


__all__ = [
    "Message",
    "add_message",
    "get_messages",
    "operation_hooks_core_plugin",
    "operation_hooks_plugin",
    "operation_messages_plugin",
    "operation_messages_preflight_plugin",
]
