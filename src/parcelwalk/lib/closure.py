"""
closure.py
- Computes every parcel a given parcel transitively needs.
- There is no parcel-to-parcel edge list: parcel A needs parcel B when A
  requires some group that B is a member of. The walk therefore runs over
  group labels, joining each one against the invoice's memberOf entries.
- Each group is expanded at most once per call, so cycles terminate.
"""

from collections import deque

from loguru import logger

from parcelwalk.lib.parcel_labels import parcels_in, requires


def _walk(invoice, parcel):
    frontier = deque()
    seen_groups = set()
    expanded = []
    found = []

    def enqueue(groups):
        for group in groups:
            if group not in seen_groups:
                seen_groups.add(group)
                frontier.append(group)

    enqueue(requires(parcel))

    while frontier:
        group = frontier.popleft()
        expanded.append(group)
        members = parcels_in(invoice, group)
        logger.debug(f"[closure] {group} -> {[m.sha256 for m in members]}")
        found.extend(members)
        for member in members:
            enqueue(requires(member))

    return expanded, found


def required_closure(invoice, parcel):
    """
    Walk `parcel`'s requirements once and return both views of the result.

    Returns:
        tuple[list[str], list[Parcel]]: The groups expanded, in expansion
        order, and the parcels found, unique by sha256 with the first
        occurrence kept, in breadth-first discovery order.
    """
    expanded, found = _walk(invoice, parcel)
    unique = {}
    for member in found:
        unique.setdefault(member.sha256, member)
    result = list(unique.values())
    logger.debug(f"[closure] {parcel.sha256} requires {len(result)} parcel(s) via {len(expanded)} group(s)")
    return expanded, result


def parcels_required_by(invoice, parcel):
    """
    Resolve the full set of parcels `parcel` depends on.

    The seed parcel appears in the result only if some group reachable from
    its requirements lists it as a member.

    Args:
        invoice (Invoice): The invoice to search.
        parcel (Parcel): The starting parcel (need not belong to the invoice).

    Returns:
        list[Parcel]: Unique by sha256, first occurrence kept, in
        breadth-first discovery order.
    """
    _, result = required_closure(invoice, parcel)
    return result


def groups_required_by(invoice, parcel):
    """
    The group labels expanded while resolving `parcel`, in expansion order.
    Groups with no members are included.
    """
    expanded, _ = _walk(invoice, parcel)
    return expanded
