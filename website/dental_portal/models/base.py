import logging

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

class CamelModel(BaseModel):
    """Base for records exchanged with the clinic API (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_api(self):
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def parse_records(validate, items):
    """Validate API records one at a time.

    A record that does not fit is logged and left out, the rest of the list
    is kept.
    """
    records = []
    for item in items or []:
        try:
            records.append(validate(item))
        except ValidationError as e:
            record_id = item.get("id") if isinstance(item, dict) else None
            logger.warning(f"Skipping malformed record {record_id}: {e}")
    return records
