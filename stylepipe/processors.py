"""CSS post-processors applied to compiled stylesheets."""

from __future__ import annotations

import logging
import os
import re
import shlex
import subprocess  # nosec B404 - postcss runs as an external command
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

import tinycss2

from stylepipe.config import Settings
from stylepipe.prefixes import (
    BUNDLED_TARGET,
    DECLARATION_AT_RULES,
    DISPLAY_VALUES,
    FLEXBOX_2009_ALIGNMENT,
    FLEXBOX_2009_DIRECTION,
    FLEXBOX_2009_FLEX_KEYWORDS,
    FLEXBOX_ALIGNMENT,
    FLEXBOX_MS_PROPERTIES,
    FLEXBOX_MS_VALUES,
    PROPERTY_PREFIXES,
    SELECTOR_PREFIXES,
    VALUE_PREFIXES,
)

logger = logging.getLogger(__name__)


class ProcessorError(RuntimeError):
    """A post-processor could not run or rejected its input."""


class CssProcessor(ABC):
    name = "processor"

    @abstractmethod
    def process(self, css: str, source: Path) -> str: ...


class AutoprefixProcessor(CssProcessor):
    """Add vendor prefixes from the bundled rule table.

    The stylesheet is tokenized with tinycss2 and written back without
    insignificant whitespace, so compressed input stays compressed.
    """

    name = "autoprefix"

    def __init__(self, browsers: Iterable[str] | None = None):
        self.browsers = list(browsers or BUNDLED_TARGET)
        requested = tuple(b.strip().lower() for b in self.browsers)
        if requested != BUNDLED_TARGET:
            logger.warning(
                "Built-in prefix rules target %s; browsers=%s needs prefixer=postcss",
                ", ".join(BUNDLED_TARGET),
                ", ".join(self.browsers),
            )

    def process(self, css: str, source: Path) -> str:
        bom = ""
        if css.startswith("\ufeff"):
            bom, css = "\ufeff", css[1:]
        nodes = tinycss2.parse_stylesheet(
            css, skip_comments=False, skip_whitespace=True
        )
        out = self._rules(nodes, source)
        if css.isascii():
            # tinycss2 decodes escapes; keep ASCII input ASCII
            out = escape_non_ascii(out)
        out = bom + out
        return out + "\n" if css.endswith("\n") else out

    def _rules(self, nodes: list, source: Path) -> str:
        parts: list[str] = []
        for node in nodes:
            if node.type == "qualified-rule":
                parts.extend(self._qualified_rule(node, source))
            elif node.type == "at-rule":
                parts.append(self._at_rule(node, source))
            elif node.type == "comment":
                parts.append(node.serialize())
            elif node.type == "error":
                logger.warning(
                    "Dropped unparseable CSS in %s: %s", source, node.message
                )
        return "".join(parts)

    def _qualified_rule(self, rule, source: Path) -> list[str]:
        selector = tinycss2.serialize(rule.prelude).strip()
        block = self._declarations(rule.content, source)
        rules = []
        for pseudo, variants in SELECTOR_PREFIXES.items():
            if pseudo in selector:
                rules.extend(
                    f"{selector.replace(pseudo, variant)}{{{block}}}"
                    for variant in variants
                )
        rules.append(f"{selector}{{{block}}}")
        return rules

    def _at_rule(self, rule, source: Path) -> str:
        header = "@" + rule.at_keyword + tinycss2.serialize(rule.prelude).rstrip()
        if rule.content is None:
            return header + ";"
        if rule.lower_at_keyword in DECLARATION_AT_RULES:
            body = self._declarations(rule.content, source)
        else:
            nested = tinycss2.parse_rule_list(
                rule.content, skip_comments=False, skip_whitespace=True
            )
            body = self._rules(nested, source)
        return f"{header}{{{body}}}"

    def _declarations(self, tokens: list, source: Path) -> str:
        parsed = tinycss2.parse_declaration_list(
            tokens, skip_comments=True, skip_whitespace=True
        )
        declarations: list[tuple[str, str, bool]] = []
        extra: list[str] = []
        for node in parsed:
            if node.type == "declaration":
                value = tinycss2.serialize(node.value).strip()
                declarations.append((node.name, value, node.important))
            elif node.type == "at-rule":
                extra.append(self._at_rule(node, source))
            elif node.type == "error":
                logger.warning(
                    "Dropped unparseable declaration in %s: %s", source, node.message
                )

        names = {name.lower() for name, _, _ in declarations}
        present = {(name.lower(), value.lower()) for name, value, _ in declarations}
        out: list[str] = []
        for name, value, important in declarations:
            for prefixed_name, prefixed_value in prefixed_variants(name, value):
                if prefixed_name != name.lower() and prefixed_name in names:
                    continue
                key = (prefixed_name, prefixed_value.lower())
                if key in present:
                    continue
                present.add(key)
                out.append(_declaration(prefixed_name, prefixed_value, important))
            out.append(_declaration(name, value, important))
        return ";".join(out) + "".join(extra)


_NON_ASCII = re.compile(r"[^\x00-\x7f]")
_HEX_OR_SPACE = frozenset("0123456789abcdefABCDEF \t\n")


def escape_non_ascii(css: str) -> str:
    """Write every non-ASCII character as a CSS hex escape (`\\201C`)."""

    def escape(match: re.Match[str]) -> str:
        following = css[match.end() : match.end() + 1]
        terminator = " " if following and following in _HEX_OR_SPACE else ""
        return f"\\{ord(match.group()):X}{terminator}"

    return _NON_ASCII.sub(escape, css)


def _declaration(name: str, value: str, important: bool) -> str:
    return f"{name}:{value}{'!important' if important else ''}"


def prefixed_variants(name: str, value: str) -> list[tuple[str, str]]:
    """Return the prefixed (property, value) pairs to emit before a declaration."""
    lname = name.lower()
    lvalue = value.lower()
    variants = [(prefix + lname, value) for prefix in PROPERTY_PREFIXES.get(lname, ())]
    if lname == "display":
        variants.extend(("display", v) for v in DISPLAY_VALUES.get(lvalue, ()))
    variants.extend(flexbox_2009_variants(lname, lvalue))
    if lname in FLEXBOX_MS_PROPERTIES:
        ms_value = value
        if lname in FLEXBOX_ALIGNMENT:
            ms_value = FLEXBOX_MS_VALUES.get(lvalue, value)
        variants.append((FLEXBOX_MS_PROPERTIES[lname], ms_value))
    variants.extend((lname, v) for v in VALUE_PREFIXES.get((lname, lvalue), ()))
    return variants


def flexbox_2009_variants(name: str, value: str) -> list[tuple[str, str]]:
    """Translate a flexbox declaration into the 2009 `-webkit-box` syntax.

    Values with no 2009 equivalent (e.g. `space-around`) produce nothing.
    """
    if name in ("flex-direction", "flex-flow"):
        for word in value.split():
            if word in FLEXBOX_2009_DIRECTION:
                orient, direction = FLEXBOX_2009_DIRECTION[word]
                return [
                    ("-webkit-box-orient", orient),
                    ("-webkit-box-direction", direction),
                ]
        return []
    if name in FLEXBOX_2009_ALIGNMENT:
        prop, mapping = FLEXBOX_2009_ALIGNMENT[name]
        return [(prop, mapping[value])] if value in mapping else []
    if name in ("flex", "flex-grow"):
        words = value.split()
        first = FLEXBOX_2009_FLEX_KEYWORDS.get(words[0], words[0]) if words else ""
        if _is_number(first):
            return [("-webkit-box-flex", first)]
        return []
    if name == "order" and value.lstrip("-").isdigit():
        return [("-webkit-box-ordinal-group", str(int(value) + 1))]
    return []


def _is_number(text: str) -> bool:
    try:
        float(text)
    except ValueError:
        return False
    return True


class PostcssProcessor(CssProcessor):
    """Pipe CSS through an external postcss + autoprefixer command."""

    name = "postcss"

    def __init__(
        self, command: str | list[str], browsers: Iterable[str] | None = None
    ):
        if isinstance(command, str):
            command = shlex.split(command)
        self.command = list(command)
        self.browsers = list(browsers or BUNDLED_TARGET)

    def process(self, css: str, source: Path) -> str:
        env = {**os.environ, "BROWSERSLIST": ", ".join(self.browsers)}
        try:
            result = subprocess.run(  # nosec B603 - command comes from settings
                self.command,
                input=css,
                capture_output=True,
                text=True,
                check=False,
                env=env,
            )
        except FileNotFoundError as exc:
            raise ProcessorError(
                f"postcss command not found: {self.command[0]}"
            ) from exc

        if result.returncode != 0:
            raise ProcessorError(
                f"postcss failed on {source} (exit {result.returncode}): "
                f"{result.stderr.strip()}"
            )
        return result.stdout


def build_processors(settings: Settings) -> list[CssProcessor]:
    """Return the post-processing chain for the configured prefixer."""
    if settings.prefixer == "builtin":
        return [AutoprefixProcessor(settings.browsers)]
    if settings.prefixer == "postcss":
        return [PostcssProcessor(settings.postcss_command, settings.browsers)]
    return []
