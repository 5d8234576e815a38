"""Name canonicalization for schema-less JSON-LD keys, types and values.

The same logical field can arrive as a bare word (``date``), a compact IRI
(``aiid:date``) or a full IRI (``https://example.org/aiid#date``). Lookups
collapse all three to the bare local name at read time; only reverse
relationships are stored under several physical aliases, since the
spelling a later lookup will use cannot be known when the edge is written.
"""

from __future__ import annotations

from typing import Any, Mapping

REVERSE_PREFIX = "_reverse_"

# Structural JSON-LD keys start with this sigil; UI annotations live under ui:
_STRUCTURAL_SIGIL = "@"
_UI_NAMESPACE = "ui:"


def is_structural_key(key: str) -> bool:
    """True for JSON-LD keywords and UI annotation keys."""
    return key.startswith(_STRUCTURAL_SIGIL) or key.startswith(_UI_NAMESPACE)


def is_reverse(name: str) -> bool:
    return name.startswith(REVERSE_PREFIX)


def forward_name(name: str) -> str:
    """Strip the reverse prefix, if any."""
    return name[len(REVERSE_PREFIX):] if is_reverse(name) else name


def local_name(name: str) -> str:
    """Reduce an IRI or compact IRI to its bare local part.

    ``https://example.org/aiid#date`` -> ``date``
    ``https://schema.org/name``       -> ``name``
    ``aiid:date``                     -> ``date``
    """
    if "://" in name:
        if "#" in name:
            local = name.rsplit("#", 1)[1]
        else:
            local = name.rstrip("/").rsplit("/", 1)[-1]
        return local or name
    if ":" in name:
        return name.rsplit(":", 1)[1] or name
    return name


def canonical_name(name: str) -> str:
    """Canonical field or relation name used as the cross-spelling key."""
    if is_reverse(name):
        return REVERSE_PREFIX + local_name(forward_name(name))
    return local_name(name)


def _namespace_from_base(base: str) -> str | None:
    rest = base.split("://", 1)[-1].rstrip("/#")
    segments = [s for s in rest.split("/") if s]
    if not segments:
        return None
    if len(segments) > 1:
        return segments[-1]
    labels = [label for label in segments[0].split(".") if label and label != "www"]
    return labels[0] if labels else None


def split_iri(
    value: str, prefixes: Mapping[str, str] | None = None
) -> tuple[str | None, str]:
    """Split a type or property IRI into (namespace prefix, local name)."""
    if "://" in value:
        for base in sorted(prefixes or {}, key=len, reverse=True):
            if value.startswith(base) and len(value) > len(base):
                return prefixes[base], value[len(base):].lstrip("#/")

        if "#" in value:
            base, local = value.rsplit("#", 1)
        else:
            base, _, local = value.rstrip("/").rpartition("/")
        return _namespace_from_base(base), local or value

    if ":" in value:
        prefix, local = value.split(":", 1)
        return prefix or None, local

    return None, value


def compact_type(value: Any, prefixes: Mapping[str, str] | None = None) -> str | None:
    """Collapse a ``@type`` value to the two-part ``ns:Local`` form.

    Lists use their first element. Returns None when no usable type exists.
    """
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if not isinstance(value, str) or not value:
        return None

    namespace, local = split_iri(value, prefixes)
    return f"{namespace}:{local}" if namespace else local


def qualified_name(
    name: str,
    fallback_namespace: str | None = None,
    prefixes: Mapping[str, str] | None = None,
) -> str | None:
    """Namespace-qualified (compact) spelling of a field or relation name."""
    namespace, local = split_iri(name, prefixes)
    namespace = namespace or fallback_namespace
    if not namespace:
        return None
    return f"{namespace}:{local}"


def expanded_iri(name: str, prefixes: Mapping[str, str] | None = None) -> str | None:
    """Full IRI spelling, when it is known or can be rebuilt from prefixes."""
    if "://" in name:
        return name
    if ":" not in name:
        return None
    prefix, local = name.split(":", 1)
    for base, known_prefix in (prefixes or {}).items():
        if known_prefix == prefix:
            return f"{base}{local}"
    return None


def reverse_aliases(
    relation: str,
    source_type: str | None = None,
    prefixes: Mapping[str, str] | None = None,
) -> tuple[str, ...]:
    """The (at most three) reverse relation names synthesized for one edge.

    Bare, namespace-qualified and IRI-qualified spellings, in that order.
    A bare relation borrows the namespace of its source entity's type.
    """
    fallback_ns = None
    if source_type and ":" in source_type:
        fallback_ns = source_type.split(":", 1)[0]

    spellings = [
        local_name(relation),
        qualified_name(relation, fallback_ns, prefixes),
        expanded_iri(relation, prefixes),
    ]

    aliases: list[str] = []
    for spelling in spellings:
        if spelling and REVERSE_PREFIX + spelling not in aliases:
            aliases.append(REVERSE_PREFIX + spelling)
    return tuple(aliases)


def value_label(value: Any) -> str:
    """Render a property value as a group label; IRIs collapse to local names."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    text = str(value)
    if "://" in text:
        return local_name(text)
    return text
