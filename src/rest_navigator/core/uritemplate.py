"""
RFC 6570 URI Templates, expanded by the `uritemplate` package.

Templates are checked for structural errors on construction, so a malformed
template from a server or a default registration fails early with
UriTemplateError instead of expanding to garbage.

Example:
    UriTemplate("children{?id,page}").expand({"id": 1}) -> "children?id=1"
"""

from __future__ import annotations

import re
from typing import Any, List, Mapping, Set

import uritemplate

from .errors import UriTemplateError

_EXPRESSION_RE = re.compile(r"\{([^{}]*)\}")
_VARSPEC_RE = re.compile(
    r"^(?P<name>(?:[A-Za-z0-9_]|%[0-9A-Fa-f]{2})(?:\.?(?:[A-Za-z0-9_]|%[0-9A-Fa-f]{2}))*)"
    r"(?:(?P<explode>\*)|:(?P<prefix>[1-9][0-9]{0,3}))?$"
)

_OPERATORS = "+#./;?&"
_RESERVED_FOR_FUTURE = "=,!@|"


def _normalize(value: Any) -> Any:
    """Strings, lists of strings or string maps; None marks an undefined value."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Mapping):
        items = {str(k): _normalize(v) for k, v in value.items() if v is not None}
        return items or None
    if isinstance(value, (list, tuple)):
        values = [_normalize(v) for v in value if v is not None]
        return values or None
    return str(value)


class UriTemplate:
    """Parsed URI Template; parsing errors surface at construction."""

    def __init__(self, template: str):
        self.template = template
        self._names: List[str] = []
        self._prefixed: Set[str] = set()

        pos = 0
        for match in _EXPRESSION_RE.finditer(template):
            self._check_literal(template[pos : match.start()])
            self._parse_expression(match.group(1))
            pos = match.end()
        self._check_literal(template[pos:])

        self._template = uritemplate.URITemplate(template)

    def _check_literal(self, literal: str) -> None:
        if "{" in literal or "}" in literal:
            raise UriTemplateError(f"Unbalanced braces in URI template {self.template!r}.")

    def _parse_expression(self, body: str) -> None:
        if not body:
            raise UriTemplateError(f"Empty expression in URI template {self.template!r}.")
        if body[0] in _RESERVED_FOR_FUTURE:
            raise UriTemplateError(
                f"Unsupported operator {body[0]!r} in URI template {self.template!r}."
            )
        if body[0] in _OPERATORS:
            body = body[1:]

        for raw in body.split(","):
            match = _VARSPEC_RE.match(raw)
            if not match:
                raise UriTemplateError(
                    f"Invalid variable {raw!r} in URI template {self.template!r}."
                )
            name = match.group("name")
            if name not in self._names:
                self._names.append(name)
            if match.group("prefix"):
                self._prefixed.add(name)

    @property
    def variable_names(self) -> List[str]:
        return list(self._names)

    def expand(self, variables: Mapping[str, Any]) -> str:
        values = {}
        for name in self._names:
            value = _normalize(variables.get(name))
            if value is None:
                continue
            if name in self._prefixed and not isinstance(value, str):
                raise UriTemplateError(
                    f"Prefix modifier not allowed on composite variable {name!r} "
                    f"in URI template {self.template!r}."
                )
            values[name] = value

        try:
            return self._template.expand(values)
        except (TypeError, ValueError) as exc:
            raise UriTemplateError(
                f"Cannot expand URI template {self.template!r}: {exc}"
            ) from exc

    def __repr__(self) -> str:
        return f"UriTemplate({self.template!r})"


def expand(template: str, variables: Mapping[str, Any]) -> str:
    return UriTemplate(template).expand(variables)


__all__ = ["UriTemplate", "expand"]
