"""
Explicit per-request context passed through service calls.
"""

from dataclasses import dataclass

from ..domain.exceptions import TenantContextError


@dataclass(frozen=True)
class RequestContext:
    """Identifies the tenant a request is made on behalf of."""
    tenant_id: str

    def require_tenant(self) -> str:
        """Return the tenant id, failing loudly when it is missing."""
        if not self.tenant_id:
            raise TenantContextError("Tenant context required. Please provide tenant information.")
        return self.tenant_id
