from pydantic import BaseModel
from typing import Optional, Dict, Any

class AuditLogCreate(BaseModel):
    tenant_id: Optional[str] = None
    table_name: str
    record_id: int
    changed_by: Optional[str] = None
    action: str
    old_values: Optional[Dict[str, Any]] = None
    new_values: Optional[Dict[str, Any]] = None
