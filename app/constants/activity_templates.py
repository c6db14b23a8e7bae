from app.constants.activity_codes import ActivityCode


ACTIVITY_TEMPLATES = {
    # ---------------- AUTH ----------------
    ActivityCode.LOGIN:
        "{actor_role} ({actor_name}) logged in",

    ActivityCode.LOGOUT:
        "{actor_role} ({actor_name}) logged out",

    # ---------------- USERS ----------------
    ActivityCode.CREATE_USER:
        "{actor_role} ({actor_name}) created user {target_name} with role {target_role}",

    ActivityCode.UPDATE_USER_ROLE:
        "{actor_role} ({actor_name}) changed role of {target_name} to {target_role}",

    ActivityCode.DEACTIVATE_USER:
        "{actor_role} ({actor_name}) deactivated user {target_name}",

    ActivityCode.REACTIVATE_USER:
        "{actor_role} ({actor_name}) reactivated user {target_name}",

    # ---------------- SUPPLIERS ----------------
    ActivityCode.CREATE_SUPPLIER:
        "{actor_role} ({actor_name}) created supplier {target_name}",

    ActivityCode.UPDATE_SUPPLIER:
        "{actor_role} ({actor_name}) updated supplier {target_name}: {changes}",

    ActivityCode.DEACTIVATE_SUPPLIER:
        "{actor_role} ({actor_name}) deactivated supplier {target_name}",

    # ---------------- CATEGORIES ----------------
    ActivityCode.CREATE_CATEGORY:
        "{actor_role} ({actor_name}) created category {target_name}",

    ActivityCode.UPDATE_CATEGORY:
        "{actor_role} ({actor_name}) updated category {target_name}: {changes}",

    ActivityCode.DEACTIVATE_CATEGORY:
        "{actor_role} ({actor_name}) deactivated category {target_name}",

    # ---------------- WAREHOUSES ----------------
    ActivityCode.CREATE_WAREHOUSE:
        "{actor_role} ({actor_name}) created warehouse {target_name}",

    ActivityCode.UPDATE_WAREHOUSE:
        "{actor_role} ({actor_name}) updated warehouse {target_name}: {changes}",

    ActivityCode.DEACTIVATE_WAREHOUSE:
        "{actor_role} ({actor_name}) deactivated warehouse {target_name}",

    # ---------------- PRODUCTS ----------------
    ActivityCode.CREATE_PRODUCT:
        "{actor_role} ({actor_name}) created product {target_name} ({product_code})",

    ActivityCode.UPDATE_PRODUCT:
        "{actor_role} ({actor_name}) updated product {target_name}: {changes}",

    ActivityCode.DEACTIVATE_PRODUCT:
        "{actor_role} ({actor_name}) deactivated product {target_name} (reason: {reason})",

    ActivityCode.REACTIVATE_PRODUCT:
        "{actor_role} ({actor_name}) reactivated product {target_name} (reason: {reason})",

    # ---------------- INVENTORY ----------------
    ActivityCode.INVENTORY_MOVEMENT:
        "{actor_role} ({actor_name}) recorded {movement_type} #{movement_id} of "
        "{quantity} units for product {product_id} "
        "(from: {source_warehouse_id}, to: {destination_warehouse_id})",
}
