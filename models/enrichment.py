from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RequestAddress(BaseModel):
    address_line1: str | None = Field(default=None, alias="addressLine1")
    address_line2: str | None = Field(default=None, alias="addressLine2")

    model_config = ConfigDict(populate_by_name=True)


class EnrichmentRequest(BaseModel):
    """Body of a Contact/Enrich call."""

    first_name: str | None = Field(default=None, alias="firstName")
    middle_name: str | None = Field(default=None, alias="middleName")
    last_name: str | None = Field(default=None, alias="lastName")
    dob: str | None = None
    age: int | None = None
    address: RequestAddress = Field(default_factory=RequestAddress)
    phone: str | None = None
    email: str | None = None

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class ResponseEmail(BaseModel):
    email: str | None = None

    model_config = ConfigDict(extra="ignore")


class ResponsePhone(BaseModel):
    number: str | None = None

    model_config = ConfigDict(extra="ignore")


class ResponseAddress(BaseModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None

    model_config = ConfigDict(extra="ignore")


class ResponsePerson(BaseModel):
    emails: list[ResponseEmail] = Field(default_factory=list)
    phones: list[ResponsePhone] = Field(default_factory=list)
    addresses: list[ResponseAddress] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    def email_list(self) -> list[str]:
        return [e.email for e in self.emails if e.email]

    def phone_list(self) -> list[str]:
        return [p.number for p in self.phones if p.number]


class EnrichmentResponse(BaseModel):
    """API response shape: strict on `person`, tolerant of everything else."""

    person: ResponsePerson

    model_config = ConfigDict(extra="ignore")


class EnrichedRecord(BaseModel):
    """Output row: original fields merged with the API response."""

    record_id: str = ""
    dob: str = ""
    full_name: str = ""
    street: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    phones: list[str] = Field(default_factory=list)
    emails: list[str] = Field(default_factory=list)

    def to_line(self) -> str:
        return ";".join([
            self.record_id,
            self.dob,
            self.full_name,
            self.street,
            self.city,
            self.state,
            self.zip,
            "|".join(self.phones),
            "|".join(self.emails),
        ])
