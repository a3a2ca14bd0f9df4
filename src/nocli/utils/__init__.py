from .ids import format_uuid, parse_page_id
from .output import dump_json, write_json
from .redact import mask_secret, redact

__all__ = [
    "format_uuid",
    "parse_page_id",
    "dump_json",
    "write_json",
    "mask_secret",
    "redact",
]
