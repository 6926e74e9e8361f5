# shopledger/models/__init__.py
from .customer import Customer, CustomerCategory
from .supplier import Supplier
from .inventory import InventoryItem
from .order import Order, OrderStatus, PaymentStatus
from .transaction import EntityType, Transaction, TransactionType
