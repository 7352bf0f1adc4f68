"""Shared schema helpers."""

from typing import Any

from pydantic import BaseModel

from basis_planner.core.errors import NOTHING_TO_UPDATE, ValidationError


class PatchModel(BaseModel):
    """Partial update payload: only fields present in the request are applied.

    None of the patchable columns accept NULL, so an explicit ``null`` is
    treated the same as a missing field.
    """

    def changes(self) -> dict[str, Any]:
        data = {
            name: value
            for name, value in self.model_dump(include=self.model_fields_set).items()
            if value is not None
        }
        if not data:
            raise ValidationError(NOTHING_TO_UPDATE)
        return data
