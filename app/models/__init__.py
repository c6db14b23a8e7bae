# Inventory
from app.models.inventory.inventory_balance_models import InventoryBalance
from app.models.inventory.movement_models import Movement
from app.models.inventory.product_audit_models import ProductAuditEvent

# Masters
from app.models.masters.product_models import Product
from app.models.masters.supplier_models import Supplier
from app.models.masters.category_models import Category
from app.models.masters.warehouse_models import Warehouse

#users and auth
from app.models.users.user_models import User, RefreshToken
from app.models.support.activity_models import UserActivity
