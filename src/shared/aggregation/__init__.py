from .dedup import append_unique, by_fields, by_id, upsert_unique
from .row_mapper import group_rows
from .shaper import as_bool, as_optional_bool, parse_json_object, shape, to_wire
from .stitcher import ChildQuery, stitch

__all__ = [
    "append_unique",
    "upsert_unique",
    "by_id",
    "by_fields",
    "group_rows",
    "ChildQuery",
    "stitch",
    "as_bool",
    "as_optional_bool",
    "parse_json_object",
    "shape",
    "to_wire",
]
