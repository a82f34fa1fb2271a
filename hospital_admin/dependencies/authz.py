# hospital_admin/dependencies/authz.py
from typing import Iterable

from fastapi import Depends, HTTPException, status

from hospital_admin.core.request_context import RequestContext, get_request_context
from hospital_admin.models.user import StaffRole


def require_roles(required_roles: Iterable[StaffRole]):
    """
    Dependency factory for role-based access.

    Usage:

    @router.post("")
    def create_bill(ctx: RequestContext = Depends(require_roles([StaffRole.CASHIER]))):
        ...

    Returns the request context if the user holds one of the required roles.
    Admins pass every role check.
    """

    required = frozenset(required_roles)

    def dependency(
        ctx: RequestContext = Depends(get_request_context),
    ) -> RequestContext:
        if not ctx.has_role(*required):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient role permissions.",
            )
        return ctx

    return dependency
