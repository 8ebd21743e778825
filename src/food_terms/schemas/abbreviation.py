"""Abbreviation corpus entry schema."""

from pydantic import BaseModel, ConfigDict, Field


class AbbreviationEntry(BaseModel):
    """A single abbreviation and its full form.

    Examples:
        >>> entry = AbbreviationEntry(
        ...     key="glv", abbr="GLV", full="Green Leafy Vegetables"
        ... )
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(
        ...,
        description="Lowercase, alphanumeric-only lookup key",
        examples=["aas"],
    )
    abbr: str = Field(
        ...,
        description="Display form as written in the source",
        examples=["AAS"],
    )
    full: str = Field(
        default="",
        description="Full form of the abbreviation",
        examples=["Atomic Absorption Spectroscopy"],
    )
