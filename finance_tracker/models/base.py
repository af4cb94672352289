"""
Shared model configuration.

Records are stored with camelCase keys (isMain, toAccountId, dueDate...)
so snapshots keep the layout of the mobile app's storage, while Python
code works with snake_case attributes.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


RECORD_CONFIG = ConfigDict(
    str_strip_whitespace=True,
    alias_generator=to_camel,
    populate_by_name=True,
)

PATCH_CONFIG = ConfigDict(
    str_strip_whitespace=True,
    alias_generator=to_camel,
    populate_by_name=True,
    extra="forbid",
)


class RecordPatch(BaseModel):
    """
    Base for partial updates.

    Every field on a patch is optional. Only the fields the caller
    actually set are merged into the stored record.
    """
    model_config = PATCH_CONFIG

    def changes(self) -> dict[str, Any]:
        """Fields explicitly set on this patch, by attribute name."""
        return self.model_dump(exclude_unset=True)
