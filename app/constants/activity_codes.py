# app/constants/activity_codes.py

from enum import Enum


class ActivityCode(str, Enum):
    # ---------------- AUTH ----------------
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"

    # ---------------- USERS ----------------
    CREATE_USER = "CREATE_USER"
    UPDATE_USER_ROLE = "UPDATE_USER_ROLE"
    DEACTIVATE_USER = "DEACTIVATE_USER"
    REACTIVATE_USER = "REACTIVATE_USER"

    # ---------------- SUPPLIERS ----------------
    CREATE_SUPPLIER = "CREATE_SUPPLIER"
    UPDATE_SUPPLIER = "UPDATE_SUPPLIER"
    DEACTIVATE_SUPPLIER = "DEACTIVATE_SUPPLIER"

    # ---------------- CATEGORIES ----------------
    CREATE_CATEGORY = "CREATE_CATEGORY"
    UPDATE_CATEGORY = "UPDATE_CATEGORY"
    DEACTIVATE_CATEGORY = "DEACTIVATE_CATEGORY"

    # ---------------- WAREHOUSES ----------------
    CREATE_WAREHOUSE = "CREATE_WAREHOUSE"
    UPDATE_WAREHOUSE = "UPDATE_WAREHOUSE"
    DEACTIVATE_WAREHOUSE = "DEACTIVATE_WAREHOUSE"

    # ---------------- PRODUCTS ----------------
    CREATE_PRODUCT = "CREATE_PRODUCT"
    UPDATE_PRODUCT = "UPDATE_PRODUCT"
    DEACTIVATE_PRODUCT = "DEACTIVATE_PRODUCT"
    REACTIVATE_PRODUCT = "REACTIVATE_PRODUCT"

    # ---------------- INVENTORY ----------------
    INVENTORY_MOVEMENT = "INVENTORY_MOVEMENT"
