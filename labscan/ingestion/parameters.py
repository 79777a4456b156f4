"""
Parameter record: the unit of output of the extraction pipeline.

`is_out_of_range` is derived from `value` and `normal_range` whenever a record
is created. Records are frozen, so editing goes through `recompute`, which
builds a new record and re-derives the flag.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Dict

from labscan.constants import OTHER_CATEGORY
from labscan.ingestion.parsers.ranges import is_out_of_range

EDITABLE_FIELDS = {"name", "value", "unit", "normal_range", "category"}


@dataclass(frozen=True)
class Parameter:
    id: str
    name: str
    value: str
    unit: str = ""
    normal_range: str = ""
    category: str = OTHER_CATEGORY
    is_out_of_range: bool = field(init=False, default=False)

    def __post_init__(self):
        object.__setattr__(self, "is_out_of_range", is_out_of_range(self.value, self.normal_range))

    def to_dict(self) -> Dict:
        return dataclasses.asdict(self)


def recompute(record: Parameter, **changes) -> Parameter:
    """Return a copy of `record` with `changes` applied and the out-of-range flag re-derived.

    Raises TypeError for fields that cannot be edited (`id`, `is_out_of_range`, unknown names).
    """
    bad = set(changes) - EDITABLE_FIELDS
    if bad:
        raise TypeError(f"Cannot edit parameter field(s): {', '.join(sorted(bad))}")
    return dataclasses.replace(record, **changes)
