"""
Test fixtures for the RentMaster backend.

Every test gets its own SQLite database file and upload directory. The
Firebase layer is bypassed by overriding get_current_user; the caller is
picked per request with the X-Test-Role header (admin by default).
"""
import os
import tempfile
from datetime import datetime
from decimal import Decimal

# Configuration is read once at import time; set it before the app loads.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(tempfile.gettempdir(), "rentmaster_import.db")
os.environ["DEBUG"] = "true"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="rentmaster_uploads_")
os.environ["ALLOWED_ORIGINS"] = "http://localhost:5173"
os.environ.pop("GOOGLE_APPLICATION_CREDENTIALS", None)

import email_validator  # noqa: E402
import pytest  # noqa: E402
from fastapi import Request  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import select  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from rentmaster.core.database import Base, get_db  # noqa: E402
from rentmaster.core.security import AuthenticatedUser, get_current_user  # noqa: E402
from rentmaster.main import app  # noqa: E402
from rentmaster.models import (  # noqa: E402
    Document,
    Lease,
    Payment,
    PaymentMode,
    Property,
    Tenant,
    Unit,
    User,
)
# Test fixtures use the reserved ".test" domain, which email-validator rejects
# unless its test-environment switch is on.
email_validator.TEST_ENVIRONMENT = True

from rentmaster.models.enums import (  # noqa: E402
    BillingCycle,
    LeaseStatus,
    PaymentStatus,
    TenantType,
    UnitStatus,
    UserRole,
)
from rentmaster.seed import seed_payment_modes  # noqa: E402
from rentmaster.services.storage import (  # noqa: E402
    LocalStorageProvider,
    StorageService,
    get_storage_service,
)

MAX_UPLOAD_BYTES = 1024 * 1024


# ── Database ──────────────────────────────────────────────────────────

@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'rentmaster.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


class Seed:
    """Writes rows directly, each helper in its own committed session."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def add(self, *rows):
        async with self.session_factory() as session:
            session.add_all(rows)
            await session.commit()
        return rows[0] if len(rows) == 1 else rows

    async def get(self, model, row_id):
        async with self.session_factory() as session:
            return await session.get(model, row_id)

    async def all(self, model, *criteria):
        async with self.session_factory() as session:
            result = await session.execute(select(model).where(*criteria))
            return list(result.scalars().all())

    async def payment_modes(self) -> dict[str, PaymentMode]:
        async with self.session_factory() as session:
            await seed_payment_modes(session)
            await session.commit()
            result = await session.execute(select(PaymentMode))
            return {mode.code: mode for mode in result.scalars().all()}

    async def property(self, name="Downtown Plaza", location="Central Business District", created_at=None):
        return await self.add(
            Property(name=name, location=location, description="", created_at=created_at or datetime.utcnow())
        )

    async def unit(self, prop, reference_code="LOC-101", status=UnitStatus.AVAILABLE):
        return await self.add(
            Unit(property_id=prop.id, reference_code=reference_code, status=status, size_m2=50)
        )

    async def tenant(self, name="Acme Trading", type=TenantType.COMPANY, email="contact@acme.test", phone="+243810000000"):
        return await self.add(Tenant(name=name, type=type, email=email, phone=phone))

    async def lease(self, tenant, unit, reference="LEASE-001", status=LeaseStatus.ACTIVE, rent="1000.00"):
        """Lease row plus the unit status it implies."""
        async with self.session_factory() as session:
            lease = Lease(
                tenant_id=tenant.id,
                unit_id=unit.id,
                lease_reference=reference,
                start_date=datetime(2024, 1, 1),
                rent_amount=Decimal(rent),
                billing_cycle=BillingCycle.MONTHLY,
                status=status,
            )
            session.add(lease)
            if status == LeaseStatus.ACTIVE:
                db_unit = await session.get(Unit, unit.id)
                db_unit.status = UnitStatus.OCCUPIED
            await session.commit()
            return lease

    async def payment(self, lease, mode, amount, paid_at, status=PaymentStatus.COMPLETED):
        return await self.add(
            Payment(
                lease_id=lease.id,
                payment_mode_id=mode.id,
                amount=Decimal(amount),
                paid_at=paid_at,
                status=status,
            )
        )

    async def document(self, owner_table, owner_id, uploaded_by, file_key="stored.pdf"):
        return await self.add(
            Document(
                owner_table=owner_table,
                owner_id=owner_id,
                file_key=file_key,
                filename="receipt.pdf",
                doc_type="RECEIPT",
                uploaded_by=uploaded_by,
            )
        )


@pytest.fixture
def seed(session_factory):
    return Seed(session_factory)


# ── Users ─────────────────────────────────────────────────────────────

def _authenticated(user: User) -> AuthenticatedUser:
    current = AuthenticatedUser(uid=user.firebase_uid, email=user.email)
    current.db_user_id = user.id
    current.full_name = user.full_name
    current.role = user.role
    return current


@pytest.fixture
async def users(seed):
    admin = User(firebase_uid="admin-uid", email="admin@rentmaster.test", full_name="System Admin", role=UserRole.ADMIN)
    manager = User(firebase_uid="manager-uid", email="manager@rentmaster.test", full_name="Grace Manager", role=UserRole.MANAGER)
    await seed.add(admin, manager)
    return {"admin": admin, "manager": manager}


# ── Application ───────────────────────────────────────────────────────

@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def storage(upload_dir):
    return StorageService(LocalStorageProvider(str(upload_dir)), MAX_UPLOAD_BYTES)


@pytest.fixture
def test_app(session_factory, users, storage):
    callers = {role: _authenticated(user) for role, user in users.items()}

    async def _get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def _current_user(request: Request) -> AuthenticatedUser:
        return callers[request.headers.get("X-Test-Role", "admin")]

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_current_user] = _current_user
    app.dependency_overrides[get_storage_service] = lambda: storage
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app):
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def manager_client(test_app):
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test", headers={"X-Test-Role": "manager"}) as ac:
        yield ac


# ── Common data ───────────────────────────────────────────────────────

@pytest.fixture
async def modes(seed):
    return await seed.payment_modes()


@pytest.fixture
async def leased(seed):
    """One property, one tenant, one unit under an ACTIVE lease."""
    prop = await seed.property()
    unit = await seed.unit(prop)
    tenant = await seed.tenant()
    lease = await seed.lease(tenant, unit)
    return {"property": prop, "unit": unit, "tenant": tenant, "lease": lease}

