"""Vendor-prefix rules for the "last 2 versions" browser target."""

from __future__ import annotations

BUNDLED_TARGET = ("last 2 versions",)

# ==========================================
# Property prefixes
# ==========================================
#
# property -> prefixes emitted ahead of the unprefixed declaration

PROPERTY_PREFIXES: dict[str, tuple[str, ...]] = {
    "appearance": ("-webkit-", "-moz-"),
    "user-select": ("-webkit-", "-moz-", "-ms-"),
    "hyphens": ("-webkit-", "-ms-"),
    "text-size-adjust": ("-webkit-", "-moz-", "-ms-"),
    "backdrop-filter": ("-webkit-",),
    "backface-visibility": ("-webkit-",),
    "box-decoration-break": ("-webkit-",),
    "clip-path": ("-webkit-",),
    "text-emphasis": ("-webkit-",),
    "text-emphasis-color": ("-webkit-",),
    "text-emphasis-position": ("-webkit-",),
    "text-emphasis-style": ("-webkit-",),
    "mask": ("-webkit-",),
    "mask-image": ("-webkit-",),
    "mask-clip": ("-webkit-",),
    "mask-composite": ("-webkit-",),
    "mask-origin": ("-webkit-",),
    "mask-position": ("-webkit-",),
    "mask-repeat": ("-webkit-",),
    "mask-size": ("-webkit-",),
    "tab-size": ("-moz-",),
    "print-color-adjust": ("-webkit-",),
}

# ==========================================
# Flexbox (2009 -webkit-box and IE10 -ms- syntaxes)
# ==========================================

DISPLAY_VALUES: dict[str, tuple[str, ...]] = {
    "flex": ("-webkit-box", "-ms-flexbox"),
    "inline-flex": ("-webkit-inline-box", "-ms-inline-flexbox"),
}

FLEXBOX_MS_PROPERTIES: dict[str, str] = {
    "flex": "-ms-flex",
    "flex-direction": "-ms-flex-direction",
    "flex-wrap": "-ms-flex-wrap",
    "flex-flow": "-ms-flex-flow",
    "order": "-ms-flex-order",
    "flex-grow": "-ms-flex-positive",
    "flex-shrink": "-ms-flex-negative",
    "flex-basis": "-ms-flex-preferred-size",
    "align-items": "-ms-flex-align",
    "align-self": "-ms-flex-item-align",
    "align-content": "-ms-flex-line-pack",
    "justify-content": "-ms-flex-pack",
}

# 2012 alignment keywords; only these properties take mapped values
FLEXBOX_MS_VALUES: dict[str, str] = {
    "flex-start": "start",
    "flex-end": "end",
    "space-between": "justify",
    "space-around": "distribute",
}
FLEXBOX_ALIGNMENT = frozenset(
    {"align-items", "align-self", "align-content", "justify-content"}
)

# 2009 -webkit-box properties paired with every -webkit-box display value
FLEXBOX_2009_DIRECTION: dict[str, tuple[str, str]] = {
    "row": ("horizontal", "normal"),
    "row-reverse": ("horizontal", "reverse"),
    "column": ("vertical", "normal"),
    "column-reverse": ("vertical", "reverse"),
}

FLEXBOX_2009_ALIGNMENT: dict[str, tuple[str, dict[str, str]]] = {
    "justify-content": (
        "-webkit-box-pack",
        {
            "flex-start": "start",
            "flex-end": "end",
            "center": "center",
            "space-between": "justify",
        },
    ),
    "align-items": (
        "-webkit-box-align",
        {
            "flex-start": "start",
            "flex-end": "end",
            "center": "center",
            "baseline": "baseline",
            "stretch": "stretch",
        },
    ),
}

# flex shorthand keywords -> -webkit-box-flex
FLEXBOX_2009_FLEX_KEYWORDS: dict[str, str] = {"none": "0", "auto": "1"}

# ==========================================
# Value prefixes
# ==========================================

VALUE_PREFIXES: dict[tuple[str, str], tuple[str, ...]] = {
    ("position", "sticky"): ("-webkit-sticky",),
}

# ==========================================
# Selector prefixes
# ==========================================
#
# Each variant gets its own copy of the rule.

SELECTOR_PREFIXES: dict[str, tuple[str, ...]] = {
    "::placeholder": (
        "::-webkit-input-placeholder",
        "::-moz-placeholder",
        ":-ms-input-placeholder",
        "::-ms-input-placeholder",
    ),
    "::selection": ("::-moz-selection",),
}

# At-rules whose block holds declarations rather than nested rules
DECLARATION_AT_RULES = frozenset(
    {"font-face", "page", "viewport", "counter-style", "property"}
)
