"""Data models for the GenAge human aging gene table."""

from pydantic import BaseModel

# Standardized column names used by every analysis component
SYMBOL = "symbol"
NAME = "name"
GENAGE_ID = "genage_id"
WHY = "why"

STANDARD_COLUMNS = [SYMBOL, NAME, GENAGE_ID, WHY]

# Header spellings accepted for each standardized column.
# The first variant is the canonical name reported in error messages;
# "GenAge.ID" is how R's read.csv mangles the "GenAge ID" header.
COLUMN_VARIANTS = {
    SYMBOL: ["symbol", "gene_symbol"],
    NAME: ["name", "gene_name"],
    GENAGE_ID: ["GenAge.ID", "GenAge ID", "genage_id"],
    WHY: ["why"],
}


class GeneRecord(BaseModel):
    """One row of the GenAge table.

    Attributes:
        symbol: HGNC gene symbol
        name: Free-text gene name
        genage_id: GenAge identifier (None if the source value did not parse)
        why: Comma-separated categories explaining the gene's inclusion
             (e.g. "mammal,cell"); empty when no category was given

    NULL genage_id means "unknown", not zero. Numeric aggregations skip it.
    """

    symbol: str
    name: str
    genage_id: int | None = None
    why: str = ""
