# backend/app/schemas/base.py
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Reads and writes camelCase field names, the shape the web client uses.

    Snake_case names are still accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


def _strip_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


# Person names are trimmed and may not be whitespace only
PersonName = Annotated[str, AfterValidator(_strip_name)]
