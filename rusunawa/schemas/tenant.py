"""
Tenant profile schemas (the subset the booking core reads).
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from rusunawa.config.settings import settings
from rusunawa.schemas.common.base import BaseSchema
from rusunawa.schemas.common.enums import TenantCategory

__all__ = ["TenantType", "TenantProfile"]


class TenantType(BaseSchema):
    tenant_type_id: Optional[int] = Field(None, alias="typeId")
    name: Optional[str] = None


class TenantProfile(BaseSchema):
    """Tenant profile as returned by `GET /v1/tenants/{id}`."""

    tenant_id: int = Field(..., ge=1)
    name: Optional[str] = None
    email: Optional[str] = None
    tenant_type: Optional[TenantType] = None

    @property
    def category(self) -> TenantCategory:
        type_name = self.tenant_type.name if self.tenant_type else None
        return TenantCategory.from_tenant_type_name(type_name, settings.STUDENT_TENANT_TYPE)

    @property
    def is_student(self) -> bool:
        return self.category is TenantCategory.STUDENT
