"""Faker-driven sample data, built through the engine so every balance is consistent."""

import random
from decimal import Decimal
from typing import Optional

from faker import Faker

from shopledger.logger_config import logger
from shopledger.models.customer import CustomerCategory
from shopledger.models.order import OrderStatus
from shopledger.schemas.customer import CustomerCreate
from shopledger.schemas.order import OrderCreate, OrderItemCreate
from shopledger.schemas.supplier import StockPurchase, SupplierCreate
from shopledger.services.customer_service import CustomerService
from shopledger.services.order_service import OrderService
from shopledger.services.pending_calculator import PendingAmountCalculator
from shopledger.services.supplier_service import SupplierService
from shopledger.storage.base import EntityStore
from shopledger.utils import money

# goods type -> (purchase price, selling rate)
GOODS = {
    "chicken": (Decimal("180.00"), Decimal("220.00")),
    "boneless": (Decimal("260.00"), Decimal("320.00")),
    "mutton": (Decimal("620.00"), Decimal("750.00")),
    "eggs": (Decimal("5.00"), Decimal("7.00")),
    "fish": (Decimal("300.00"), Decimal("380.00")),
}


def populate(store: EntityStore, customers: int = 8, suppliers: int = 3, seed: Optional[int] = None) -> dict:
    fake = Faker("en_IN")
    rng = random.Random(seed)
    if seed is not None:
        Faker.seed(seed)

    supplier_service = SupplierService(store)
    customer_service = CustomerService(store)
    order_service = OrderService(store)
    calculator = PendingAmountCalculator(store)

    supplier_ids = []
    for _ in range(suppliers):
        supplier = supplier_service.create_supplier(SupplierCreate(
            name=fake.company(),
            contact=fake.msisdn()[:10],
            opening_balance=Decimal(rng.randint(0, 20)) * 500,
        ))
        supplier_ids.append(supplier.id)

    for goods_type, (price, _) in GOODS.items():
        supplier_service.receive_stock(StockPurchase(
            supplier_id=rng.choice(supplier_ids),
            type=goods_type,
            quantity=Decimal(rng.randint(150, 300)) if goods_type != "eggs" else Decimal(1000),
            price=price,
            unit="pcs" if goods_type == "eggs" else None,
        ))

    order_count = 0
    for _ in range(customers):
        customer = customer_service.create_customer(CustomerCreate(
            name=fake.name(),
            contact=fake.msisdn()[:10],
            category=rng.choice(list(CustomerCategory)),
        ))

        for _ in range(rng.randint(1, 3)):
            picked = rng.sample(sorted(GOODS), k=rng.randint(1, 2))
            items = [
                OrderItemCreate(type=goods_type, quantity=Decimal(rng.randint(1, 5)), rate=GOODS[goods_type][1])
                for goods_type in picked
            ]
            order_service.create_order(OrderCreate(
                customer_id=customer.id,
                items=items,
                order_status=OrderStatus.CONFIRMED,
            ))
            order_count += 1

        pending = calculator.calculate_customer_pending(customer.id)
        if pending > 0 and rng.random() < 0.5:
            calculator.process_payment(customer.id, money.round_money(pending / 2),
                                       description="Sample part payment")

    logger.info(f"✅ Sample data loaded: {suppliers} suppliers, {customers} customers, {order_count} orders")
    return {"suppliers": suppliers, "customers": customers, "orders": order_count}
