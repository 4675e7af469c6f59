"""
Base schemas with standardized field types for consistent API responses.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic_core import core_schema

from ..utils.intervals import as_utc


class StandardizedModel(BaseModel):
    """Base model with standardized JSON encoding"""

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True, from_attributes=True)


class Money(Decimal):
    """Money field that always serializes as float"""

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        def validate_money(value: Any) -> Decimal:
            if isinstance(value, bool):
                raise ValueError("Cannot convert bool to Money")
            if isinstance(value, (int, float)):
                return cls(str(value))
            if isinstance(value, str):
                return cls(value)
            if isinstance(value, Decimal):
                return value
            raise ValueError(f"Cannot convert {type(value)} to Money")

        return core_schema.no_info_after_validator_function(
            validate_money,
            core_schema.union_schema(
                [
                    core_schema.int_schema(),
                    core_schema.float_schema(),
                    core_schema.str_schema(),
                    core_schema.is_instance_schema(Decimal),
                ]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(
                float,
                info_arg=False,
                return_schema=core_schema.float_schema(),
            ),
        )


def _to_utc(value: Any) -> Any:
    # SQLite hands back naive datetimes; everything is stored as UTC.
    if isinstance(value, datetime):
        return as_utc(value)
    return value


UtcDatetime = Annotated[datetime, BeforeValidator(_to_utc)]
OptionalUtcDatetime = Annotated[Optional[datetime], BeforeValidator(_to_utc)]
