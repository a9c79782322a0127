"""Column types, value coercion and date patterns."""

from netsuite_query.schema.type_mappings import TypeMapper
from netsuite_query.schema.dates import format_to_iso, iso_to_format

__all__ = ["TypeMapper", "format_to_iso", "iso_to_format"]
