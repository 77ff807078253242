"""
Shared builders for invoice and parcel records used across the test modules.
"""

import pytest

from parcelwalk.core.invoice import BindleSpec, Conditions, Invoice, Label, Parcel


def make_parcel(sha256, member_of=None, requires=None, annotations=None, name=None):
    """Helper to create a Parcel; conditions are omitted when both lists are None."""
    conditions = None
    if member_of is not None or requires is not None:
        conditions = Conditions(
            member_of=tuple(member_of) if member_of is not None else None,
            requires=tuple(requires) if requires is not None else None,
        )
    return Parcel(
        label=Label(sha256=sha256, name=name or f"{sha256}.wasm", annotations=annotations),
        conditions=conditions,
    )


def make_invoice(*parcels, parcel_list=True):
    return Invoice(
        bindle=BindleSpec(name="example.com/app", version="1.0.0"),
        parcel=tuple(parcels) if parcel_list else None,
    )


@pytest.fixture
def diamond_invoice():
    """
    a requires [db, web]; b in db, c in web; b and c both require cache;
    d in cache. No cycle.
    """
    a = make_parcel("a", requires=["db", "web"])
    b = make_parcel("b", member_of=["db"], requires=["cache"])
    c = make_parcel("c", member_of=["web"], requires=["cache"])
    d = make_parcel("d", member_of=["cache"])
    return make_invoice(a, b, c, d)
