from typing import Any

from pydantic import BaseModel, Field, field_validator


# --- Catalog ---

class Product(BaseModel):
    name: str = Field(alias="product_name")
    manufacturer: str
    family: str = ""
    model: str
    announced_date: str = Field(alias="announced-date")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("family", mode="before")
    @classmethod
    def _missing_family(cls, v: Any) -> Any:
        return "" if v is None else v


# --- Listing ---

class Listing(BaseModel):
    title: str
    manufacturer: str
    currency: str
    price: str
    # Original JSON object, echoed verbatim in the output file
    raw: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True, "coerce_numbers_to_str": True}

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "Listing":
        return cls.model_validate({**raw, "raw": raw})

    def payload(self) -> dict[str, Any]:
        """Return the object written back out for this listing."""
        if self.raw:
            return self.raw
        return self.model_dump(exclude={"raw"})
