# app/constants/error_codes.py

from enum import Enum


class ErrorCode(str, Enum):
    # ---------------- GENERIC ----------------
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    NO_CHANGES_DETECTED = "NO_CHANGES_DETECTED"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # ---------------- USERS ----------------
    USER_NOT_FOUND = "USER_NOT_FOUND"
    USER_USERNAME_EXISTS = "USER_USERNAME_EXISTS"
    USER_ROLE_INVALID = "USER_ROLE_INVALID"

    # ---------------- MASTERS ----------------
    SUPPLIER_NOT_FOUND = "SUPPLIER_NOT_FOUND"
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    CATEGORY_NAME_EXISTS = "CATEGORY_NAME_EXISTS"
    WAREHOUSE_NOT_FOUND = "WAREHOUSE_NOT_FOUND"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    PRODUCT_CODE_EXISTS = "PRODUCT_CODE_EXISTS"
    PRODUCT_STATE_INVALID = "PRODUCT_STATE_INVALID"

    # ---------------- INVENTORY ----------------
    MOVEMENT_NOT_FOUND = "MOVEMENT_NOT_FOUND"
    MOVEMENT_INVALID = "MOVEMENT_INVALID"
    MOVEMENT_IMMUTABLE = "MOVEMENT_IMMUTABLE"
    PRODUCT_INACTIVE = "PRODUCT_INACTIVE"
    WAREHOUSE_INACTIVE = "WAREHOUSE_INACTIVE"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
