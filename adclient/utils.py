from __future__ import annotations

from .errors import FilterTemplateError


def escape_ldap_filter_value(value: str) -> str:
    """RFC 4515 escaping for LDAP filter values."""
    out: list[str] = []
    for ch in value:
        if ch == "\\":
            out.append("\\5c")
        elif ch == "*":
            out.append("\\2a")
        elif ch == "(":
            out.append("\\28")
        elif ch == ")":
            out.append("\\29")
        elif ch == "\x00":
            out.append("\\00")
        else:
            out.append(ch)
    return "".join(out)


def render_filter(template: str, value: str) -> str:
    """Substitute an escaped value into every ``%s`` slot of a filter template.

    ``render_filter("(userPrincipalName=%s)", "a*")`` -> ``(userPrincipalName=a\\2a)``
    """
    if "%s" not in (template or ""):
        raise FilterTemplateError(f"filter template has no %s slot: {template!r}")
    return template.replace("%s", escape_ldap_filter_value(value or ""))


def domain_to_base_dn(domain: str) -> str:
    domain = (domain or "").strip().strip(".")
    if not domain or "." not in domain:
        return ""
    parts = [p for p in domain.split(".") if p]
    return ",".join([f"DC={p}" for p in parts])


def split_names(text: str) -> list[str]:
    """Split a ``;`` or ``,`` separated list, dropping blanks."""
    if not text:
        return []
    return [x.strip() for x in text.replace(",", ";").split(";") if x.strip()]
