# app/models/enums/user_role.py

from enum import Enum


class UserRole(str, Enum):
    ADMINISTRATOR = "administrator"
    OPERATOR = "operator"
    VIEWER = "viewer"


# Roles allowed to mutate stock and master data
WRITE_ROLES = [UserRole.ADMINISTRATOR.value, UserRole.OPERATOR.value]
