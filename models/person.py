from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Address(BaseModel):
    line1: str = ""
    line2: str = ""

    model_config = ConfigDict(frozen=True)


class Person(BaseModel):
    """One parsed input record."""

    record_id: str = ""
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    dob: str | None = None
    age: int | None = None
    address: Address = Field(default_factory=Address)
    phone: str | None = None
    email: str | None = None
    # Every accepted candidate, kept as the fallback list for output
    phones: list[str] = Field(default_factory=list)
    emails: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(p for p in parts if p)

    @property
    def display_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip() or "<unnamed>"
