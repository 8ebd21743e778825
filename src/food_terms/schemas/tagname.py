"""INFOODS tagname corpus entry schema."""

from pydantic import BaseModel, ConfigDict, Field


class TagnameEntry(BaseModel):
    """Details of a tagname (abbreviated food component).

    An all-empty instance is used as a placeholder when a search hit
    references a code that is absent from the corpus.
    """

    model_config = ConfigDict(frozen=True)

    code: str = Field(default="", description="Tagname code", examples=["AAA"])
    name: str = Field(
        default="",
        description="Name of the food component",
        examples=["amino acids, total aromatic"],
    )
    synonyms: str = Field(default="", description="Synonyms for the food component")
    unit: str = Field(default="", description="Unit of measure", examples=["mg", "g", "IU"])
    tables: str = Field(
        default="",
        description="Tables where the food component is found",
        examples=["USDA 523, EA, SWD"],
    )
    comments: str = Field(default="", description="Comments about the food component")
    examples: str = Field(default="", description="Examples for the food component")
