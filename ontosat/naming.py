"""Naming policy for classes minted in terminological mode.

`hasChild some Person` is named `hasChildPerson`, in Person's namespace.
`hasChild some owl:Thing` is named `owl:hasChildThing`.
"""

from __future__ import annotations

from ontosat.model import AtomicClass, Property


def mint_class_name(prop: Property, filler: AtomicClass) -> AtomicClass:
    """Name for the class equivalent to `prop some filler`.

    Pure: equal (prop, filler) pairs always give equal names.
    """
    if not isinstance(filler, AtomicClass):
        raise TypeError(f"Only named fillers can be named, got {filler!r}")
    return AtomicClass(f"{filler.namespace}{prop.name}{filler.name}")
