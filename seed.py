# seed.py
"""Wipe users and timetables, then load the demo accounts."""
import asyncio
from sqlalchemy import delete

from shared.auth import get_password_hash
from shared.db import AsyncSessionLocal, engine, Base
from services.user_management.core.identity import normalize_user
from services.user_management.core.roles import ADMIN_ROLES, Department, UserRole
from services.user_management.models.users import User
from services.timetable_management.models.cells import TimetableCell
from services.timetable_management.models.timetables import Timetable

ADMIN_PASSWORD = "admin123"
USER_PASSWORD = "user123"


def demo_users():
    yield dict(
        user_id="SA001", name="Super Administrator", email="superadmin@timetable.com",
        password=ADMIN_PASSWORD, role=UserRole.SUPER_ADMIN, is_approved=True,
    )
    for department, role in ADMIN_ROLES.items():
        code = department.value
        yield dict(
            user_id=f"{code}001", name=f"{code} Department Admin",
            email=f"{code.lower()}.admin@timetable.com",
            password=ADMIN_PASSWORD, role=role, is_approved=True,
        )
    for n, label in ((1, "One"), (2, "Two")):
        yield dict(
            user_id=f"PU00{n}", name=f"Pending User {label}", email=f"pending{n}@timetable.com",
            password=USER_PASSWORD, role=UserRole.PENDING, is_approved=False,
        )


async def seed():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        await db.execute(delete(TimetableCell))
        await db.execute(delete(Timetable))
        await db.execute(delete(User))
        print("🧹 Cleared existing data")

        for account in demo_users():
            user = User(
                user_id=account["user_id"],
                name=account["name"],
                email=account["email"],
                hashed_password=get_password_hash(account["password"]),
                role=account["role"],
                department=Department.NONE,
                is_approved=account["is_approved"],
                is_active=True,
                is_deleted=False,
            )
            db.add(normalize_user(user))
            print(f"✓ {account['role'].value} {account['user_id']} (password: {account['password']})")

        await db.commit()
    await engine.dispose()
    print("✅ Seed data created")


if __name__ == "__main__":
    asyncio.run(seed())
