"""Base schema class with camelCase alias generation.

Backend Python code stays snake_case. API JSON output becomes camelCase,
so FileRecord.upload_time is served as "uploadTime".
"""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelORMModel(BaseModel):
    """Base for response schemas. Reads from model attributes, outputs camelCase."""
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
        "protected_namespaces": (),
    }
