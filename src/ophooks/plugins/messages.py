"""Operation messages plugin.

Gives every root operation a list of messages in ``info.meta``.
Hooks and resolvers add messages with ``add_message``; any message
with level "error" aborts the operation before the resolver runs
(or before its result is returned), and the collected messages are
attached to the resulting error's extensions.

This plugin applies to every root field, so it also guarantees every
root resolver gets wrapped.
"""

from dataclasses import dataclass
from typing import Any

from ophooks.config import BuildOptions
from ophooks.hooks.errors import OperationError
from ophooks.hooks.types import FieldContext, HookBundle, HookDescriptor
from ophooks.schema.builder import Build, SchemaBuilder

MESSAGES_KEY = "messages"


@dataclass
class Message:
    """A message produced while running an operation.

    Attributes:
        level: "error", "warning", "info", ...
        message: Human-readable text
        path: Optional path to the input the message is about
    """

    level: str
    message: str
    path: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"level": self.level, "message": self.message}
        if self.path is not None:
            data["path"] = list(self.path)
        return data


def get_messages(info: Any) -> list[Message]:
    return info.meta.setdefault(MESSAGES_KEY, [])


def add_message(
    info: Any, message: str, level: str = "error", path: list[str] | None = None
) -> Message:
    """Record a message for the current operation."""
    entry = Message(level=level, message=message, path=path)
    get_messages(info).append(entry)
    return entry


async def add_messages_to_meta(value, args, context, info):
    info.meta[MESSAGES_KEY] = []
    return value


async def validate_messages(value, args, context, info):
    first_error = next((m for m in get_messages(info) if m.level == "error"), None)
    if first_error:
        raise OperationError(
            f"Aborting {info.field_name} due to error: {first_error.message}"
        )
    return value


async def add_messages_to_error(error, args, context, info):
    extensions = getattr(error, "extensions", None)
    if not isinstance(extensions, dict):
        extensions = {}
        error.extensions = extensions
    extensions[MESSAGES_KEY] = [m.to_dict() for m in get_messages(info)]
    return error


def messages_hooks(context: FieldContext) -> HookBundle:
    return HookBundle(
        before=[
            HookDescriptor(priority=100, callback=add_messages_to_meta),
            HookDescriptor(priority=900, callback=validate_messages),
        ],
        after=[HookDescriptor(priority=900, callback=validate_messages)],
        error=[HookDescriptor(priority=500, callback=add_messages_to_error)],
    )


def register_messages_hooks(build: Build) -> None:
    build.add_operation_hook(messages_hooks)


def operation_messages_plugin(builder: SchemaBuilder, options: BuildOptions) -> None:
    builder.hook("init", register_messages_hooks)
