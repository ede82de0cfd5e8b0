import json
from typing import Any


def parse_json_column(value: Any) -> Any:
    # Raw SQL queries return json columns as text
    if isinstance(value, (str, bytes)):
        return json.loads(value)
    return value
