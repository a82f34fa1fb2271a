# hospital_admin/core/request_context.py
from fastapi import Depends

from hospital_admin.api.v1.endpoints.auth import get_current_user
from hospital_admin.models.user import StaffRole, User


class RequestContext:
    """
    Wraps the acting staff user for one request.

    Services take ids from here explicitly (registered_by, created_by, ...)
    instead of reading a global session.
    """

    def __init__(self, user: User):
        self.user = user

    @property
    def user_id(self):
        return self.user.id

    @property
    def role(self) -> StaffRole:
        return self.user.role

    def has_role(self, *roles: StaffRole) -> bool:
        return self.user.role == StaffRole.ADMIN or self.user.role in roles


def get_request_context(
    current_user: User = Depends(get_current_user),
) -> RequestContext:
    return RequestContext(user=current_user)
