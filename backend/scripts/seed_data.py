"""
Seed script to generate synthetic departments, stores, users, catalog items
and purchase requisitions for demo purposes.

PRs are created, approved, rejected and received through the workflow
service so lots, stock transactions and notifications are seeded as well.
"""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.orm import Session
from app.database import SessionLocal, engine, Base
from app.models.department import Department
from app.models.store import Store
from app.models.user import User
from app.models.master_item import MasterItem
from app.schemas.pr import PRCreate, PRItemCreate, ReceiveGoodsRequest, ReceiveItem
from app.services.pr_workflow_service import build_workflow_service
from app.utils.pr_rules import PRPriority
from datetime import date, timedelta
from faker import Faker

fake = Faker()

UNITS = ("pcs", "box", "pack", "kg", "bottle")
CATEGORIES = ("Office Supplies", "Cleaning", "Electrical", "Medical", "Food & Beverage")


def create_departments(db: Session, count: int = 2) -> list[Department]:
    """Create synthetic departments"""
    departments = []
    for i in range(count):
        department = Department(
            code=f"D{str(i+1).zfill(2)}",
            name=f"{fake.unique.word().title()} Department",
            description=fake.catch_phrase()
        )
        db.add(department)
        departments.append(department)
    db.commit()
    return departments


def create_stores(db: Session, departments: list[Department], per_department: int = 2) -> list[Store]:
    """Create stores for each department"""
    stores = []
    for department in departments:
        for i in range(per_department):
            store = Store(
                department_id=department.id,
                code=f"S{str(i+1).zfill(2)}",
                name=f"{fake.city()} Store",
                description=fake.street_address()
            )
            db.add(store)
            stores.append(store)
    db.commit()
    return stores


def create_users(db: Session, stores: list[Store], staff_per_store: int = 2) -> list[User]:
    """Create one manager and some staff per store, plus an admin"""
    users = []

    def add_user(role: str, store: Store = None) -> User:
        profile = fake.unique.simple_profile()
        user = User(
            username=profile["username"],
            full_name=profile["name"],
            email=profile["mail"],
            role=role,
            department_id=store.department_id if store else None,
            store_id=store.id if store else None
        )
        db.add(user)
        users.append(user)
        return user

    add_user("admin")
    for store in stores:
        add_user("manager", store)
        for _ in range(staff_per_store):
            add_user("user", store)

    db.commit()
    return users


def create_master_items(db: Session, count: int = 15) -> list[MasterItem]:
    """Create synthetic catalog items"""
    items = []
    for i in range(count):
        item = MasterItem(
            sku=f"SKU-{str(i+1).zfill(5)}",
            barcode=fake.ean13(),
            name=fake.unique.catch_phrase(),
            description=fake.sentence(nb_words=8),
            category=fake.random_element(elements=CATEGORIES),
            unit=fake.random_element(elements=UNITS)
        )
        db.add(item)
        items.append(item)
    db.commit()
    return items


def create_purchase_requisitions(
    db: Session,
    stores: list[Store],
    users: list[User],
    items: list[MasterItem],
    count: int = 10
) -> dict:
    """Create PRs and walk them through different workflow stages"""
    service = build_workflow_service()
    counts = {"pending": 0, "approved": 0, "rejected": 0, "partially_received": 0, "fully_received": 0}

    for i in range(count):
        store = fake.random_element(elements=stores)
        staff = [u for u in users if u.store_id == store.id and u.role == "user"]
        manager = next(u for u in users if u.store_id == store.id and u.role == "manager")

        lines = [
            PRItemCreate(
                master_item_id=item.id,
                quantity=fake.random_int(min=2, max=50),
                estimated_unit_cost=round(fake.random.uniform(1.0, 200.0), 2)
            )
            for item in fake.random_sample(elements=items, length=fake.random_int(min=1, max=4))
        ]
        created = service.create_pr(
            PRCreate(
                store_id=store.id,
                requester_id=fake.random_element(elements=staff).id,
                priority=fake.random_element(elements=list(PRPriority)),
                required_date=date.today() + timedelta(days=fake.random_int(min=-5, max=14)),
                notes=fake.sentence(),
                items=lines
            ),
            db
        )

        stage = i % 5
        if stage == 0:
            counts["pending"] += 1
            continue
        if stage == 1:
            service.reject_pr(created.id, manager.id, "Budget exceeded for this period", db)
            counts["rejected"] += 1
            continue

        service.approve_pr(created.id, manager.id, db)
        if stage == 2:
            counts["approved"] += 1
            continue

        pr = service.get_pr_by_id(created.id, db)
        full = stage == 4
        receive_lines = [
            ReceiveItem(
                pr_item_id=item.id,
                quantity=item.quantity if full else max(1, item.quantity // 2),
                unit_cost=round(item.estimated_unit_cost * fake.random.uniform(0.9, 1.1), 2)
            )
            for item in pr.items
        ]
        result = service.receive_goods(
            created.id,
            ReceiveGoodsRequest(
                po_number=f"PO-{date.today().year}-{str(i+1).zfill(4)}",
                supplier_name=fake.company(),
                supplier_contact=fake.phone_number(),
                invoice_number=f"INV-{fake.random_int(min=10000, max=99999)}",
                items=receive_lines,
                user_id=manager.id
            ),
            db
        )
        counts[result.status.value] = counts.get(result.status.value, 0) + 1

    return counts


def main():
    """Main seeding function"""
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        print("Creating departments...")
        departments = create_departments(db)
        print(f"Created {len(departments)} departments")

        print("Creating stores...")
        stores = create_stores(db, departments)
        print(f"Created {len(stores)} stores")

        print("Creating users...")
        users = create_users(db, stores)
        print(f"Created {len(users)} users")

        print("Creating master items...")
        items = create_master_items(db)
        print(f"Created {len(items)} master items")

        print("Creating purchase requisitions...")
        counts = create_purchase_requisitions(db, stores, users, items)

        print("\nSeeding complete!")
        print(f"Summary:")
        print(f"  - Departments: {len(departments)}")
        print(f"  - Stores: {len(stores)}")
        print(f"  - Users: {len(users)}")
        print(f"  - Master items: {len(items)}")
        print(f"  - Purchase requisitions: {sum(counts.values())}")
        for status, count in counts.items():
            print(f"    - {status}: {count}")

    except Exception as e:
        print(f"Error during seeding: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
