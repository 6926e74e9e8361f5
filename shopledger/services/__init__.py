from .customer_service import CustomerService
from .data_repair import DataRepairService
from .inventory_manager import InventoryManager
from .order_service import OrderService
from .pending_calculator import PendingAmountCalculator
from .supplier_service import SupplierService
