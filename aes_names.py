"""
Aesthetic name helpers used when rebinding scales

Names are compared by their logical identity: "color_new_new" and "color_new"
are both the "color" aesthetic, bumped two and one times.
"""

import re
import logging
from copy import copy
from collections.abc import Mapping, MutableMapping
from functools import singledispatch
from typing import Dict, List, Iterable, Any

import pandas as pd

logger = logging.getLogger(__name__)

REBIND_SUFFIX = "_new"


def strip_rebind_suffix(name: str, suffix: str = REBIND_SUFFIX) -> str:
    """
    Remove every trailing rebind suffix from an aesthetic name

    Args:
        name: Aesthetic name, possibly bumped ("color_new_new")
        suffix: Suffix added by each rebind

    Returns:
        Logical aesthetic name ("color")
    """
    return re.sub(f"(?:{re.escape(suffix)})+$", "", name)


def bump_name(name: str, suffix: str = REBIND_SUFFIX) -> str:
    return f"{name}{suffix}"


def matching_names(names: Iterable[str], aesthetic: str,
                   suffix: str = REBIND_SUFFIX) -> List[str]:
    """
    Names that refer to the same logical aesthetic, in their original order
    """
    if names is None:
        return []
    return [n for n in names
            if isinstance(n, str) and strip_rebind_suffix(n, suffix) == aesthetic]


def bump_renames(names: Iterable[str], aesthetic: str,
                 suffix: str = REBIND_SUFFIX) -> Dict[str, str]:
    """
    Old -> new name pairs for every name matching the aesthetic

    Args:
        names: Candidate names (mapping keys, scale aesthetics, ...)
        aesthetic: Logical aesthetic being rebound
        suffix: Suffix added by the rebind

    Returns:
        Dictionary like {"color": "color_new", "color_new": "color_new_new"}
    """
    return {n: bump_name(n, suffix) for n in matching_names(names, aesthetic, suffix)}


@singledispatch
def rename(container: Any, renames: Dict[str, str]) -> Any:
    """
    Rename aesthetic names inside a container without touching the original

    Lists, tuples and sets hold names; mappings are keyed by name; attribute
    namespaces (dataclasses such as plotnine's labels and guides containers)
    hold one attribute per name. All renames apply at once, so a chain like
    {"color": "color_new", "color_new": "color_new_new"} is safe.

    Args:
        container: Names to rename
        renames: Old name -> new name

    Returns:
        A renamed container of the same type
    """
    if not renames or not hasattr(container, "__dict__"):
        return container

    attrs = vars(container)
    moving = {old: attrs[old] for old in renames if old in attrs}
    if not moving:
        return container

    new = copy(container)
    for old in moving:
        setattr(new, old, None)
    for old, value in moving.items():
        setattr(new, renames[old], value)
    return new


@rename.register(type(None))
def _rename_none(container, renames):
    return None


@rename.register(str)
def _rename_str(container, renames):
    return renames.get(container, container)


@rename.register(list)
@rename.register(tuple)
def _rename_sequence(container, renames):
    return type(container)(renames.get(n, n) for n in container)


@rename.register(set)
@rename.register(frozenset)
def _rename_set(container, renames):
    return type(container)(renames.get(n, n) for n in container)


@rename.register(Mapping)
def _rename_mapping(container, renames):
    if not any(k in renames for k in container):
        return container

    items = [(renames.get(k, k), v) for k, v in container.items()]
    if isinstance(container, MutableMapping):
        # keeps the mapping type, e.g. plotnine's aes
        new = copy(container)
        new.clear()
        for k, v in items:
            new[k] = v
        return new
    return dict(items)


def rename_columns(data, renames: Dict[str, str]):
    """
    Rename columns of a DataFrame, or index labels of a Series

    plotnine hands legend keys to geoms one row at a time, as Series.
    """
    if not renames:
        return data
    if isinstance(data, pd.DataFrame):
        present = {k: v for k, v in renames.items() if k in data.columns}
        return data.rename(columns=present) if present else data
    if isinstance(data, pd.Series):
        present = {k: v for k, v in renames.items() if k in data.index}
        return data.rename(index=present) if present else data
    return data
