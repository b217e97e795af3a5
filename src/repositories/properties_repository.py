from __future__ import annotations

from typing import Dict, Iterable, Optional

from src.core.supabase import SupabaseClient
from src.models.bookings import PropertyRecord


PROPERTIES_TABLE = "properties"


class PropertiesRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def get_property_by_id(self, property_id: str) -> Optional[PropertyRecord]:
        rows, _ = self.client.select(
            table=PROPERTIES_TABLE,
            select="*",
            filters=[("id", f"eq.{property_id}")],
            limit=1,
        )
        if not rows:
            return None
        return PropertyRecord.model_validate(rows[0])

    def list_property_names(self, property_ids: Iterable[str]) -> Dict[str, str]:
        ids = sorted({property_id for property_id in property_ids if property_id})
        if not ids:
            return {}
        rows, _ = self.client.select(
            table=PROPERTIES_TABLE,
            select="id,name",
            filters=[("id", f"in.({','.join(ids)})")],
        )
        return {str(row["id"]): row["name"] for row in rows if row.get("name")}
