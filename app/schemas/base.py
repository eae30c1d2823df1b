"""
Base Pydantic schemas
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema with common configuration

    Python attributes are snake_case, the wire format is camelCase.
    Requests are accepted in either form.
    """
    model_config = ConfigDict(
        from_attributes=True,
        use_enum_values=True,
        validate_default=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )
