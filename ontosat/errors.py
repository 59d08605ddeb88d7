"""Error kinds raised at the boundaries of the saturator.

The saturation core itself never raises; these surface from loading,
parsing, configuring and saving ontologies.
"""


class OntoSatError(Exception):
    """Base class for every error reported by ontosat."""
    pass


class InvalidArgumentError(OntoSatError):
    """A required input (file path, ontology, mode) is missing or invalid."""
    pass


class ParseFailureError(OntoSatError):
    """The input cannot be interpreted as a well-formed ontology or axiom."""
    pass


class StorageFailureError(OntoSatError):
    """The saturated ontology could not be written."""
    pass
