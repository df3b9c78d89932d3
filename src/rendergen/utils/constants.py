"""Tag tables for the web platform.

Reserved tags are the ones the runtime creates natively; any other tag
may resolve to a component.
"""

from __future__ import annotations

# Source: WHATWG HTML Living Standard, plus legacy shadow-DOM v0 tags
HTML_TAGS: frozenset[str] = frozenset(
    {
        # Document metadata and sectioning
        "html", "body", "base", "head", "link", "meta", "style", "title",
        "address", "article", "aside", "footer", "header",
        "h1", "h2", "h3", "h4", "h5", "h6", "hgroup", "nav", "section",
        # Grouping content
        "div", "dd", "dl", "dt", "figcaption", "figure", "picture", "hr",
        "img", "li", "main", "ol", "p", "pre", "ul",
        # Text-level semantics
        "a", "b", "abbr", "bdi", "bdo", "br", "cite", "code", "data", "dfn",
        "em", "i", "kbd", "mark", "q", "rp", "rt", "rtc", "ruby", "s", "samp",
        "small", "span", "strong", "sub", "sup", "time", "u", "var", "wbr",
        # Embedded content and media
        "area", "audio", "map", "track", "video", "embed", "object", "param",
        "source", "canvas", "script", "noscript", "iframe",
        # Edits
        "del", "ins",
        # Tables
        "caption", "col", "colgroup", "table", "thead", "tbody", "tfoot",
        "td", "th", "tr",
        # Forms
        "button", "datalist", "fieldset", "form", "input", "label", "legend",
        "meter", "optgroup", "option", "output", "progress", "select",
        "textarea",
        # Interactive and web components
        "details", "dialog", "menu", "menuitem", "summary", "content",
        "element", "shadow", "template", "blockquote",
    }
)

# SVG elements, lowercased; lookups are case-insensitive
SVG_TAGS: frozenset[str] = frozenset(
    {
        "svg", "animate", "circle", "clippath", "cursor", "defs", "desc",
        "ellipse", "filter", "font-face", "foreignobject", "g", "glyph",
        "image", "line", "marker", "mask", "missing-glyph", "path", "pattern",
        "polygon", "polyline", "rect", "switch", "symbol", "text", "textpath",
        "tspan", "use", "view",
    }
)

# Tags handled by the compiler itself, never hoisted
BUILT_IN_TAGS: frozenset[str] = frozenset({"slot", "component"})


def is_reserved_tag(tag: str) -> bool:
    """Web platform predicate: HTML or SVG tag."""
    return tag in HTML_TAGS or tag.lower() in SVG_TAGS


def is_built_in_tag(tag: str) -> bool:
    return tag in BUILT_IN_TAGS
