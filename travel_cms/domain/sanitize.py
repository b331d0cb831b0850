"""
HTML sanitizer for rich text sections.

Text sections carry author-supplied HTML that is treated as untrusted.

Key behaviors:
- Keeps only allow-listed tags and, per tag, allow-listed attributes
- Drops script-like elements together with their contents
- Removes HTML comments
- Escapes stray angle brackets outside recognised tags
- Rejects links and images using forbidden protocols (javascript:, data:, vbscript:)
- Adds rel="noopener noreferrer" to links

The sanitizer is deterministic: the same input and config always produce the
same output.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field

# --- Configuration ---


@dataclass(frozen=True)
class SanitizerConfig:
    """Sanitizer allow-lists, normally built from rules.yaml."""

    allow_tags: frozenset[str] = field(
        default_factory=lambda: frozenset(
            [
                "p",
                "br",
                "h2",
                "h3",
                "h4",
                "blockquote",
                "ul",
                "ol",
                "li",
                "strong",
                "b",
                "em",
                "i",
                "u",
                "a",
                "img",
            ]
        )
    )

    allow_attrs: dict[str, frozenset[str]] = field(
        default_factory=lambda: {
            "a": frozenset(["href", "title"]),
            "img": frozenset(["src", "alt", "title", "width", "height"]),
        }
    )

    # Elements removed along with everything inside them
    drop_content_tags: frozenset[str] = field(
        default_factory=lambda: frozenset(
            ["script", "style", "iframe", "object", "embed", "noscript", "template"]
        )
    )

    forbid_protocols: frozenset[str] = field(
        default_factory=lambda: frozenset(["javascript:", "data:", "vbscript:"])
    )

    add_noopener: bool = True
    add_noreferrer: bool = True


DEFAULT_CONFIG = SanitizerConfig()


@dataclass(frozen=True)
class SanitizeWarning:
    """Something the sanitizer removed."""

    code: str
    message: str


# --- URLs ---

_URL_NOISE = re.compile(r"[\x00-\x20\x7f]+")


def is_safe_url(url: str, config: SanitizerConfig = DEFAULT_CONFIG) -> bool:
    """
    Check that a URL does not use a forbidden protocol.

    Entities and embedded whitespace/control characters are removed first so
    obfuscated values such as ``jav&#x09;ascript:`` are caught.
    """
    if not url:
        return True
    normalized = _URL_NOISE.sub("", html.unescape(url)).lower()
    return not any(normalized.startswith(protocol) for protocol in config.forbid_protocols)


def build_link_rel(config: SanitizerConfig = DEFAULT_CONFIG) -> str:
    parts = []
    if config.add_noopener:
        parts.append("noopener")
    if config.add_noreferrer:
        parts.append("noreferrer")
    return " ".join(parts)


# --- HTML ---

TAG_PATTERN = re.compile(r"<(/?)([a-zA-Z][\w-]*)([^<>]*)>")
ATTR_PATTERN = re.compile(r'([\w-]+)\s*=\s*(?:"([^"]*)"|\'([^\']*)\'|([^\s"\'>]+))')
COMMENT_PATTERN = re.compile(r"<!--.*?(?:-->|$)", re.DOTALL)


def parse_attributes(attr_string: str) -> dict[str, str]:
    attrs = {}
    for match in ATTR_PATTERN.finditer(attr_string):
        name = match.group(1).lower()
        value = match.group(2) or match.group(3) or match.group(4) or ""
        attrs[name] = html.unescape(value)
    return attrs


def _escape_text(text: str) -> str:
    return text.replace("<", "&lt;").replace(">", "&gt;")


def _drop_content_pattern(config: SanitizerConfig) -> re.Pattern[str] | None:
    if not config.drop_content_tags:
        return None
    names = "|".join(sorted(re.escape(tag) for tag in config.drop_content_tags))
    return re.compile(rf"<({names})\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)


def sanitize_html(
    html_content: str,
    config: SanitizerConfig = DEFAULT_CONFIG,
) -> tuple[str, list[SanitizeWarning]]:
    """
    Sanitize an HTML fragment.

    Returns:
        Tuple of (sanitized_html, list of warnings for what was removed)
    """
    warnings: list[SanitizeWarning] = []

    text = COMMENT_PATTERN.sub("", html_content)

    drop_pattern = _drop_content_pattern(config)
    if drop_pattern is not None:

        def drop(match: re.Match[str]) -> str:
            warnings.append(
                SanitizeWarning(
                    code="dropped_element",
                    message=f"Element '{match.group(1).lower()}' was removed with its content",
                )
            )
            return ""

        text = drop_pattern.sub(drop, text)

    def process_tag(match: re.Match[str]) -> str:
        is_closing = bool(match.group(1))
        tag_name = match.group(2).lower()

        if tag_name not in config.allow_tags:
            warnings.append(
                SanitizeWarning(code="stripped_tag", message=f"Tag '{tag_name}' was stripped")
            )
            return ""

        if is_closing:
            return f"</{tag_name}>"

        allowed_attrs = config.allow_attrs.get(tag_name, frozenset())
        filtered: dict[str, str] = {}
        for name, value in parse_attributes(match.group(3)).items():
            if name in allowed_attrs:
                filtered[name] = value
            else:
                warnings.append(
                    SanitizeWarning(
                        code="stripped_attribute",
                        message=f"Attribute '{name}' stripped from '{tag_name}'",
                    )
                )

        url_attr = {"a": "href", "img": "src"}.get(tag_name)
        if url_attr and not is_safe_url(filtered.get(url_attr, ""), config):
            warnings.append(
                SanitizeWarning(
                    code="unsafe_url",
                    message=f"Unsafe URL protocol in {url_attr} of '{tag_name}'",
                )
            )
            filtered.pop(url_attr)

        if tag_name == "a":
            rel = build_link_rel(config)
            if rel:
                filtered["rel"] = rel

        if filtered:
            attr_parts = [
                f'{name}="{html.escape(value.strip())}"' for name, value in filtered.items()
            ]
            return f"<{tag_name} {' '.join(attr_parts)}>"
        return f"<{tag_name}>"

    parts: list[str] = []
    pos = 0
    for match in TAG_PATTERN.finditer(text):
        parts.append(_escape_text(text[pos : match.start()]))
        parts.append(process_tag(match))
        pos = match.end()
    parts.append(_escape_text(text[pos:]))

    return "".join(parts), warnings
