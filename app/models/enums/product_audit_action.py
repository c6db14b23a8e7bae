from enum import Enum


class ProductAuditAction(str, Enum):
    DEACTIVATE = "deactivate"
    REACTIVATE = "reactivate"
