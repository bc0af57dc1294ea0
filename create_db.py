# create_db.py
import asyncio
from shared.db import engine, Base

# Import all models here so they are registered with SQLAlchemy's metadata
import services.user_management.models
import services.timetable_management.models

async def init_models():
    async with engine.begin() as conn:
        print("🔧 Creating tables...")
        await conn.run_sync(Base.metadata.create_all)
        print("✅ Tables created.")
    await engine.dispose()

if __name__ == "__main__":
    asyncio.run(init_models())
