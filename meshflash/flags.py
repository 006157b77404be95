"""Compile-time flag generation for meshflash."""

from __future__ import annotations

import re
from collections.abc import Mapping

from meshflash.catalog import COMMON_FLAGS, FLAGS, Board, FlagDefinition, Variant, get_flag

_DEFINE_PREFIX = "-D"
_WHITESPACE = re.compile(r"\s+")


def format_flag(definition: FlagDefinition, value) -> str | None:
    """Render a single flag, or None when it must be left out."""
    if value is None or value == "":
        return None
    return definition.kind.format(definition.name, value)


def parse_custom_flags(text: str | None) -> list[str]:
    """Split free-form flag text into NAME=value tokens.

    Tokens are separated by any run of whitespace; a leading -D is dropped.
    """
    if not text or not text.strip():
        return []
    flags = []
    for token in _WHITESPACE.split(text.strip()):
        if token.startswith(_DEFINE_PREFIX):
            token = token[len(_DEFINE_PREFIX):]
        if token:
            flags.append(token)
    return flags


def _resolve(user_flags: Mapping[str, object], definition: FlagDefinition):
    """The user's value, or the registry default when unset. An empty string stays empty."""
    value = user_flags.get(definition.name)
    return definition.default if value is None else value


def compile_flags(
    board: Board,
    variant: Variant,
    user_flags: Mapping[str, object] | None = None,
    custom_flags: str | None = "",
) -> list[str]:
    """Build the ordered, de-duplicated list of compile definitions.

    Precedence, first writer wins: the variant's required flags, the common
    flags, the variant's optional flags (only when the user set them), then
    the free-form custom text.
    """
    user_flags = user_flags or {}
    flags: list[str] = []
    seen: set[str] = set()

    def emit(name: str, rendered: str | None) -> None:
        if rendered is not None and name not in seen:
            flags.append(rendered)
            seen.add(name)

    for name in variant.required_flags:
        definition = get_flag(name)
        if definition is None or name in seen:
            continue
        emit(name, format_flag(definition, _resolve(user_flags, definition)))

    for name in COMMON_FLAGS:
        definition = FLAGS[name]
        if name in seen:
            continue
        value = _resolve(user_flags, definition)
        if value is False:
            continue
        emit(name, format_flag(definition, value))

    for name in variant.optional_flags:
        value = user_flags.get(name)
        if value is None or value == "" or name in seen:
            continue
        definition = get_flag(name)
        if definition is None:
            emit(name, f"{name}={value}")
        else:
            emit(name, format_flag(definition, value))

    for token in parse_custom_flags(custom_flags):
        emit(token.split("=", 1)[0], token)

    return flags
