"""
Seed reference data.

Creates the payment mode catalogue and, optionally, the first administrator
(the Firebase account must already exist) and a demo property. Safe to run
repeatedly: existing rows are left untouched.

Usage:
    python -m rentmaster.seed
    python -m rentmaster.seed --admin-uid <firebase uid> --admin-email admin@rentmaster.com
    python -m rentmaster.seed --demo
"""

import argparse
import asyncio
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentmaster.core.database import AsyncSessionLocal
from rentmaster.models.enums import UnitStatus, UserRole
from rentmaster.models.payment import PaymentMode
from rentmaster.models.property import Property, Unit
from rentmaster.models.user import User

logger = logging.getLogger(__name__)

PAYMENT_MODES = [
    {"code": "CASH", "display_name": "Cash", "requires_proof": False},
    {"code": "BANK_TRANSFER", "display_name": "Bank Transfer", "requires_proof": True},
    {"code": "MOBILE_MONEY", "display_name": "Mobile Money", "requires_proof": True},
]


async def seed_payment_modes(db: AsyncSession) -> int:
    """Insert missing payment modes. Returns how many were created."""
    result = await db.execute(select(PaymentMode.code))
    existing = set(result.scalars().all())

    created = 0
    for mode in PAYMENT_MODES:
        if mode["code"] not in existing:
            db.add(PaymentMode(**mode))
            created += 1
    await db.flush()
    return created


async def ensure_admin(
    db: AsyncSession,
    firebase_uid: str,
    email: str,
    full_name: str,
) -> User:
    """Return the user for firebase_uid, creating it as ADMIN if missing."""
    result = await db.execute(select(User).where(User.firebase_uid == firebase_uid))
    user = result.scalar_one_or_none()
    if user:
        return user

    user = User(firebase_uid=firebase_uid, email=email, full_name=full_name, role=UserRole.ADMIN)
    db.add(user)
    await db.flush()
    return user


async def seed_demo_property(db: AsyncSession) -> Optional[Property]:
    """Demo property with two available locals, unless LOC-101 already exists."""
    result = await db.execute(select(Unit.id).where(Unit.reference_code == "LOC-101"))
    if result.first() is not None:
        return None

    prop = Property(
        name="Downtown Plaza",
        location="Central Business District",
        description="Mixed-use property with shops and offices",
    )
    db.add(prop)
    await db.flush()
    db.add_all([
        Unit(property_id=prop.id, reference_code="LOC-101", status=UnitStatus.AVAILABLE, size_m2=50),
        Unit(property_id=prop.id, reference_code="LOC-102", status=UnitStatus.AVAILABLE, size_m2=75),
    ])
    await db.flush()
    return prop


async def run(args: argparse.Namespace) -> None:
    async with AsyncSessionLocal() as db:
        created = await seed_payment_modes(db)
        logger.info("Payment modes created: %d", created)

        if args.admin_uid:
            if not args.admin_email:
                raise SystemExit("--admin-email is required with --admin-uid")
            admin = await ensure_admin(db, args.admin_uid, args.admin_email, args.admin_name)
            logger.info("Administrator: %s", admin.email)

        if args.demo:
            prop = await seed_demo_property(db)
            logger.info("Demo property: %s", prop.name if prop else "already present")

        await db.commit()


def main():
    parser = argparse.ArgumentParser(
        description="RentMaster reference data seeding",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--admin-uid", help="Firebase uid of the first administrator")
    parser.add_argument("--admin-email", help="Email of the first administrator")
    parser.add_argument("--admin-name", default="System Admin", help="Full name of the first administrator")
    parser.add_argument("--demo", action="store_true", help="Also create a demo property with two locals")

    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    asyncio.run(run(args))


if __name__ == "__main__":
    main()
