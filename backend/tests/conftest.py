import os

# app.database builds its engine at import time; keep it off postgres
os.environ.setdefault("DATABASE_URL", "sqlite://")

from itertools import count
from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base
from app.models import Department, Store, User, MasterItem
from app.schemas.pr import PRCreate, PRItemCreate, ReceiveGoodsRequest, ReceiveItem
from app.services.pr_workflow_service import PRWorkflowService
from app.services.stock_ledger import StockLedger
from app.utils.id_generator import SequenceIdGenerator


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seed(db):
    """One department with two stores, three users and five catalog items"""
    department = Department(code="D01", name="Operations")
    db.add(department)
    db.flush()

    store = Store(department_id=department.id, code="S01", name="Main Store")
    other_store = Store(department_id=department.id, code="S02", name="Annex Store")
    db.add_all([store, other_store])
    db.flush()

    requester = User(username="jdoe", full_name="Jordan Doe", email="jdoe@example.com",
                     role="user", department_id=department.id, store_id=store.id)
    manager = User(username="mlee", full_name="Morgan Lee", email="mlee@example.com",
                   role="manager", department_id=department.id, store_id=store.id)
    admin = User(username="admin", full_name="Alex Admin", email="admin@example.com", role="admin")
    db.add_all([requester, manager, admin])

    items = [
        MasterItem(sku=f"SKU-{n:05d}", name=f"Item {n}", description=f"Catalog item {n}", unit="pcs")
        for n in range(1, 6)
    ]
    db.add_all(items)
    db.commit()

    return SimpleNamespace(
        department=department,
        store=store,
        other_store=other_store,
        requester=requester,
        manager=manager,
        admin=admin,
        items=items
    )


def numbers(prefix: str) -> SequenceIdGenerator:
    return SequenceIdGenerator(f"{prefix}-20250114-{n:04d}" for n in count(1))


@pytest.fixture
def make_workflow():
    """Build a workflow service with deterministic PR and lot numbers"""
    def _make(**kwargs) -> PRWorkflowService:
        kwargs.setdefault("pr_numbers", numbers("PR"))
        kwargs.setdefault("ledger", StockLedger(lot_numbers=numbers("LOT")))
        return PRWorkflowService(**kwargs)
    return _make


@pytest.fixture
def workflow(make_workflow):
    return make_workflow()


@pytest.fixture
def create_pr(db, seed):
    """Create a PR through a workflow service; lines are (master_item_id, quantity, cost)"""
    def _create(service, lines=((5, 10, 2.0),), required_date=None, store=None):
        data = PRCreate(
            store_id=(store or seed.store).id,
            requester_id=seed.requester.id,
            required_date=required_date,
            notes="Monthly restock",
            items=[
                PRItemCreate(master_item_id=item_id, quantity=quantity, estimated_unit_cost=cost)
                for item_id, quantity, cost in lines
            ]
        )
        return service.create_pr(data, db)
    return _create


@pytest.fixture
def approved_pr(db, seed, workflow, create_pr):
    """Approved PR with two lines: item 1 x10 @ 3.5 and item 2 x5 @ 12"""
    created = create_pr(workflow, lines=((1, 10, 3.5), (2, 5, 12.0)))
    workflow.approve_pr(created.id, seed.manager.id, db)
    return workflow.get_pr_by_id(created.id, db)


def receive_request(*lines, po_number="PO-1001", supplier_name="Acme Supplies", **kwargs) -> ReceiveGoodsRequest:
    """lines are (pr_item_id, quantity) or (pr_item_id, quantity, unit_cost)"""
    return ReceiveGoodsRequest(
        po_number=po_number,
        supplier_name=supplier_name,
        items=[
            ReceiveItem(pr_item_id=line[0], quantity=line[1], unit_cost=line[2] if len(line) > 2 else None)
            for line in lines
        ],
        **kwargs
    )
