"""Header redaction for request and response attribute groups."""

from collections.abc import Iterable, Mapping, Sequence
from typing import Union

from starlette.datastructures import Headers

HEADERS_KEY = "headers"

HeaderSource = Union[Headers, Mapping[str, Union[str, Sequence[str]]]]


def _header_items(headers: HeaderSource) -> Iterable[tuple[str, Sequence[str]]]:
    """Yield (name, values) once per distinct header name."""
    if isinstance(headers, Headers):
        seen: set[str] = set()
        for name in headers.keys():
            if name in seen:
                continue
            seen.add(name)
            yield name, headers.getlist(name)
        return

    for name, values in headers.items():
        if values is None:
            values = []
        elif isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
            # single value, including non-str scalars such as a length
            values = [values]
        yield name, values


def redact_headers(
    headers: HeaderSource,
    leak: bool,
    sensitive: frozenset[str] | set[str],
) -> dict[str, str]:
    """Build the "headers" attribute group.

    Names are lower-cased. Sensitive names are dropped unless ``leak`` is set,
    and names without values are dropped. Multi-valued headers render as
    ``"[a], [b]"``, the format existing log consumers parse.

    Args:
        headers: Starlette headers or a mapping of name to value(s)
        leak: Keep sensitive headers
        sensitive: Lower-case header names to drop

    Returns:
        Mapping of lower-case header name to rendered value
    """
    collected: dict[str, list[str]] = {}

    for name, values in _header_items(headers):
        name = name.lower()
        if name in sensitive and not leak:
            continue
        # a plain mapping may carry the same name under several casings
        collected.setdefault(name, []).extend(
            v.decode("latin-1") if isinstance(v, bytes) else str(v) for v in values
        )

    group: dict[str, str] = {}
    for name, values in collected.items():
        if not values:
            continue
        if len(values) == 1:
            group[name] = values[0]
        else:
            group[name] = "[" + "], [".join(values) + "]"

    return group
