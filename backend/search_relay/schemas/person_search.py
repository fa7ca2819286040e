"""Person Search Schemas: inbound body validation.

Invariants:
    - firstName, lastName, ssn: present, strings, non-empty (no format checks)
    - Unknown fields ignored
    - Any validation failure → ValidationFailure naming the first bad field
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from search_relay.core.domain_types import SearchQuery
from search_relay.core.errors import ValidationFailure


class PersonSearchRequest(BaseModel):
    """Body of POST /tlo/person-search."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    first_name: StrictStr = Field(alias="firstName", min_length=1)
    last_name: StrictStr = Field(alias="lastName", min_length=1)
    ssn: StrictStr = Field(min_length=1)

    def to_query(self) -> SearchQuery:
        return SearchQuery(
            first_name=self.first_name, last_name=self.last_name, ssn=self.ssn,
        )


def parse_search_query(payload: Any) -> SearchQuery:
    """Validate a decoded JSON body into a SearchQuery."""
    if not isinstance(payload, dict):
        raise ValidationFailure("body")
    try:
        return PersonSearchRequest.model_validate(payload).to_query()
    except ValidationError as e:
        errors = e.errors()
        field = ".".join(str(loc) for loc in errors[0]["loc"]) if errors else "body"
        raise ValidationFailure(field) from e
