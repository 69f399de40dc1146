"""Infrastructure ORM Models"""

from .user_model import UserModel
from .customer_model import CustomerModel
from .catalog_model import CatalogModelORM
from .order_model import OrderModel

__all__ = [
    'UserModel',
    'CustomerModel',
    'CatalogModelORM',
    'OrderModel',
]
