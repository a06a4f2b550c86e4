"""GenAge dataset loading and record model."""

from genage_eda.dataset.models import (
    COLUMN_VARIANTS,
    GENAGE_ID,
    NAME,
    STANDARD_COLUMNS,
    SYMBOL,
    WHY,
    GeneRecord,
)
from genage_eda.dataset.load import infer_separator, iter_records, load_genage

__all__ = [
    "COLUMN_VARIANTS",
    "GENAGE_ID",
    "NAME",
    "STANDARD_COLUMNS",
    "SYMBOL",
    "WHY",
    "GeneRecord",
    "infer_separator",
    "iter_records",
    "load_genage",
]
