from __future__ import annotations

from .models import MULTI_VALUED_ATTRIBUTES, DirectoryEntry, Record

_MULTI_VALUED = {name.lower() for name in MULTI_VALUED_ATTRIBUTES}
_GROUP_MEMBERSHIP = "memberof"


def is_multi_valued(name: str) -> bool:
    return (name or "").lower() in _MULTI_VALUED


def group_name(dn: str) -> str:
    """Name of a group from its DN (CN=Admins,OU=Groups,... -> Admins).

    Only the first component is kept and its first three characters are
    dropped, assuming a ``CN=`` prefix. A value without a comma is returned
    unchanged.
    """
    if "," not in dn:
        return dn
    return dn.split(",", 1)[0][3:]


def normalize(entry: DirectoryEntry) -> Record:
    """Collapse a raw entry to one value per attribute.

    Attributes in MULTI_VALUED_ATTRIBUTES keep every value in order, all
    others keep only the first. Attributes without values are left out.
    """
    record: Record = {}
    for name, values in entry.attributes.items():
        if not values:
            continue
        if name.lower() == _GROUP_MEMBERSHIP:
            record[name] = [group_name(v) for v in values]
        elif is_multi_valued(name):
            record[name] = list(values)
        else:
            record[name] = values[0]
    return record
