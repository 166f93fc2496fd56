"""Territory storage record export."""

import json
from typing import Optional

from ..core.models import TerritoryPolygon


def export_record(
    polygon: TerritoryPolygon,
    output_path: str,
    user_id: Optional[str] = None,
    started_at: Optional[str] = None,
) -> dict:
    """Write the territory as the record the territory backend stores."""
    record = polygon.to_storage_record()
    record["user_id"] = user_id
    record["started_at"] = started_at
    record["is_active"] = True
    with open(output_path, "w") as f:
        json.dump(record, f, indent=2)
    return record
