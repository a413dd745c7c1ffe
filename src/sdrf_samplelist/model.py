"""
Sample list data model written into the mzML ``sampleList``.
"""

from dataclasses import dataclass, field
from typing import Tuple, Union


@dataclass(frozen=True)
class CVParam:
    """A controlled-vocabulary parameter (``cvParam``)."""

    accession: str
    cv_ref: str
    name: str
    value: str = ""


@dataclass(frozen=True)
class UserParam:
    """A free-text parameter (``userParam``)."""

    name: str
    value: str = ""


Param = Union[CVParam, UserParam]


@dataclass(frozen=True)
class Sample:
    """One ``sample`` element: an id, a display name, and ordered params."""

    id: str
    name: str
    params: Tuple[Param, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "params", tuple(self.params))


@dataclass(frozen=True)
class SampleList:
    """
    The ``sampleList`` element.

    ``count`` is fixed when the list is built and always equals the number
    of samples.
    """

    samples: Tuple[Sample, ...] = ()
    count: int = field(init=False)

    def __post_init__(self):
        samples = tuple(self.samples)
        ids = [s.id for s in samples]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate sample ids in sample list: {ids}")
        object.__setattr__(self, "samples", samples)
        object.__setattr__(self, "count", len(samples))

    def __len__(self) -> int:
        return self.count

    def __iter__(self):
        return iter(self.samples)
