"""
Ontology term mappings for SDRF values.

Some columns carry their meaning in the value rather than the header: a
``comment[label]`` of ``TMT126`` names a specific PSI-MS reagent term.
"""

from types import MappingProxyType
from typing import Dict, Mapping, Optional

from sdrf_samplelist.sdrf.reader import SDRFReader

# TMT reagent CV terms (PSI-MS ontology)
TMT_LABEL_TERMS: Mapping[str, Dict[str, str]] = MappingProxyType({
    "TMT126":  {"name": "TMT reagent 126",  "accession": "MS:1002616"},
    "TMT127":  {"name": "TMT reagent 127",  "accession": "MS:1002617"},
    "TMT128":  {"name": "TMT reagent 128",  "accession": "MS:1002618"},
    "TMT129":  {"name": "TMT reagent 129",  "accession": "MS:1002619"},
    "TMT130":  {"name": "TMT reagent 130",  "accession": "MS:1002620"},
    "TMT131":  {"name": "TMT reagent 131",  "accession": "MS:1002621"},
    "TMT127N": {"name": "TMT reagent 127N", "accession": "MS:1002763"},
    "TMT127C": {"name": "TMT reagent 127C", "accession": "MS:1002764"},
    "TMT128N": {"name": "TMT reagent 128N", "accession": "MS:1002765"},
    "TMT128C": {"name": "TMT reagent 128C", "accession": "MS:1002766"},
    "TMT129N": {"name": "TMT reagent 129N", "accession": "MS:1002767"},
    "TMT129C": {"name": "TMT reagent 129C", "accession": "MS:1002768"},
    "TMT130N": {"name": "TMT reagent 130N", "accession": "MS:1002769"},
    "TMT130C": {"name": "TMT reagent 130C", "accession": "MS:1002770"},
})


def cv_ref_of(accession: str) -> str:
    """The CV prefix of an accession, e.g. ``MS`` for ``MS:1002616``."""
    return accession.split(":", 1)[0]


def get_value_term(value: str, terms: Mapping[str, Dict[str, str]]) -> Optional[Dict[str, str]]:
    """
    Look up the term a cell value names.

    Accepts plain values (``TMT126``) and SDRF ontology values
    (``NT=TMT126;AC=PRIDE:0000285``).  Matching is case-insensitive.
    """
    name = SDRFReader.parse_ontology_value(value)["name"]
    if not name:
        return None

    if name in terms:
        return terms[name]

    name_lower = name.lower()
    for key, term in terms.items():
        if key.lower() == name_lower:
            return term

    return None
