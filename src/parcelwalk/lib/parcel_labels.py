"""
parcel_labels.py
- Structural queries over a single parcel or a whole invoice.
- Group labels are plain strings named in a parcel's conditions:
    - memberOf: the groups the parcel belongs to
    - requires: the groups the parcel needs
- An absent field is never an error: it reads as "no annotations",
  "no requirements" or "not a member".
"""


def has_annotation(parcel, key):
    annotations = parcel.label.annotations
    return annotations is not None and key in annotations


def requires(parcel):
    """
    Group labels the parcel requires, in declaration order.

    Returns:
        list[str]: A fresh list; empty if there is no conditions block or no
        requires entry.
    """
    conditions = parcel.conditions
    if conditions is None or conditions.requires is None:
        return []
    return list(conditions.requires)


def is_member_of(parcel, group):
    conditions = parcel.conditions
    if conditions is None or conditions.member_of is None:
        return False
    return group in conditions.member_of


def parcels_in(invoice, group):
    """
    All parcels of the invoice that are members of `group`, in invoice order.
    """
    return [p for p in invoice.parcel or () if is_member_of(p, group)]
