# reset_db.py
import asyncio
from shared.db import engine, Base

import services.user_management.models
import services.timetable_management.models

async def reset_db():
    async with engine.begin() as conn:
        print("🧹 Dropping tables...")
        await conn.run_sync(Base.metadata.drop_all)
        print("🔧 Creating tables...")
        await conn.run_sync(Base.metadata.create_all)
        print("✅ Database reset.")
    await engine.dispose()

if __name__ == "__main__":
    asyncio.run(reset_db())
