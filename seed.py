import argparse

from shopledger.core.config import settings
from shopledger.core.database import Base, SessionLocal, engine
from shopledger.models import Customer, InventoryItem, Order, Supplier, Transaction
from shopledger.storage import SqlAlchemyStore
from shopledger.utils.sample_data import populate

parser = argparse.ArgumentParser(description="Load Faker sample data into the SQL database")
parser.add_argument("--customers", type=int, default=8)
parser.add_argument("--suppliers", type=int, default=3)
parser.add_argument("--seed", type=int, default=None)
parser.add_argument("--keep", action="store_true", help="Keep existing rows")
args = parser.parse_args()

Base.metadata.create_all(bind=engine)
db = SessionLocal()

try:
    if not args.keep:
        print("🔄 Clearing existing data...")
        for model in (Transaction, Order, InventoryItem, Customer, Supplier):
            db.query(model).delete()
        db.commit()
        print("✅ Data cleared.")

    print(f"🔄 Seeding {settings.database_url}...")
    counts = populate(SqlAlchemyStore(db), customers=args.customers, suppliers=args.suppliers, seed=args.seed)
    print(f"✅ Seeded {counts['suppliers']} suppliers")
    print(f"✅ Seeded {counts['customers']} customers")
    print(f"✅ Seeded {counts['orders']} orders")
except Exception as e:
    db.rollback()
    print(f"❌ Seeding failed: {e}")
    raise
finally:
    db.close()
