"""
BileMo API — Entity Re-validation
===================================

Updates merge the submitted fields onto the stored values and validate the
merged result against the same constraints a create must satisfy. Nothing
is written to the entity until validation passes, so a rejected update
leaves the row untouched.
"""

from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError

from app.exceptions import ValidationFailedError
from app.schemas.common import violations_from_errors

SchemaT = TypeVar("SchemaT", bound=BaseModel)

UNIQUE_EMAIL_MESSAGE = "This value is already used."


def merge_changes(current: Dict[str, Any], changes: BaseModel) -> Dict[str, Any]:
    """Fields the client actually sent override `current`; explicit nulls included."""
    merged = dict(current)
    merged.update(changes.model_dump(exclude_unset=True, by_alias=False))
    return {key: merged[key] for key in current}


def revalidate(schema: Type[SchemaT], data: Dict[str, Any]) -> SchemaT:
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise ValidationFailedError(violations=violations_from_errors(exc.errors()))
