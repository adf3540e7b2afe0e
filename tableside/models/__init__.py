from tableside.models.menu_item import MenuItem
from tableside.models.order import Order
from tableside.models.order_item import OrderItem
from tableside.models.admin_user import AdminUser
