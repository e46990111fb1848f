"""Strip hidden or abusive markup from user-authored GitHub text.

Pure text transformation. Issue bodies, comments and reviews can hide
instructions from a human reader (zero-width characters, HTML comments,
collapsed sections, microscopic fonts) while a model still reads them. The
pipeline below neutralises those tricks before text reaches the host.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_INVISIBLE_CHARS = re.compile(r"[\u200B-\u200F\u2028-\u202E\u2060-\u2064\uFEFF]")
_HTML_COMMENTS = re.compile(r"<!--[\s\S]*?-->")
_DANGEROUS_TAGS = ("script", "style", "iframe", "object", "embed", "svg", "math", "link")
_HTML_ELEMENTS = [re.compile(rf"<{tag}[^>]*>[\s\S]*?</{tag}>") for tag in _DANGEROUS_TAGS]
_HIDING_ATTRIBUTES_TAG = re.compile(r'<[^>]*(?:style|data-[\w-]+|hidden|class)="[^"]*"[^>]*>')
_HIDING_ATTRIBUTE = re.compile(r'\s+(?:style|data-[\w-]+|hidden|class)="[^"]*"')
_COLLAPSED_SECTION = re.compile(r"<details>[\s\S]*?</details>")
_SUMMARY = re.compile(r"<summary>(.*?)</summary>")
_SMALL_TEXT = re.compile(r'<[^>]*style="[^"]*font-size:\s*(?:0|0\.\d+|[0-3])(?:px|pt|em|%)[^"]*"[^>]*>[\s\S]*?</[^>]+>')
_EXCESSIVE_NEWLINES = re.compile(r"\n{4,}")
_EXCESSIVE_SPACES = re.compile(r" {15,}")
_EXCESSIVE_TABS = re.compile(r"\t{6,}")

HTML_COMMENT_MARKER = "[HTML_COMMENT]"
HTML_ELEMENT_MARKER = "[HTML_ELEMENT]"
SMALL_TEXT_MARKER = "[SMALL_TEXT]"
DEFAULT_SUMMARY = "Collapsed section"


@dataclass(frozen=True)
class SanitizeConfig:
    disabled: bool = False


DEFAULT_CONFIG = SanitizeConfig()


def clean_html_attributes(tag: str) -> str:
    """Drop ``style``, ``data-*``, ``hidden`` and ``class`` attributes from one tag."""
    return _HIDING_ATTRIBUTE.sub("", tag)


def make_collapsed_section_visible(section: str) -> str:
    """Render a ``<details>`` block as a bold heading followed by its body."""
    match = _SUMMARY.search(section)
    summary = match.group(1) if match else DEFAULT_SUMMARY

    head, sep, tail = section.partition("</summary>")
    if sep:
        content = tail.removesuffix("</details>")
    else:
        content = head.removeprefix("<details>").removesuffix("</details>")
    return f"\n\n**{summary}:**\n{content}\n\n"


def sanitize(text: str, config: SanitizeConfig | None = None) -> str:
    """Return *text* with hidden content removed or made visible.

    Deterministic and total; ``config.disabled`` or empty input returns the
    input unchanged.
    """
    cfg = config or DEFAULT_CONFIG
    if cfg.disabled or not text:
        return text

    result = _INVISIBLE_CHARS.sub("", text)
    result = _HTML_COMMENTS.sub(HTML_COMMENT_MARKER, result)
    for pattern in _HTML_ELEMENTS:
        result = pattern.sub(HTML_ELEMENT_MARKER, result)
    result = _HIDING_ATTRIBUTES_TAG.sub(lambda m: clean_html_attributes(m.group(0)), result)
    result = _COLLAPSED_SECTION.sub(lambda m: make_collapsed_section_visible(m.group(0)), result)
    result = _SMALL_TEXT.sub(SMALL_TEXT_MARKER, result)
    result = _EXCESSIVE_NEWLINES.sub("\n\n\n", result)
    # Tabs become spaces first so the space cap also bounds the replacement.
    result = _EXCESSIVE_TABS.sub(" " * 5, result)
    return _EXCESSIVE_SPACES.sub(" " * 14, result)
