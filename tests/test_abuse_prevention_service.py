import asyncio

from sqlalchemy import func, select

from app.models import IPUsageRecord
from app.services.abuse_prevention import abuse_prevention_service

IP = "203.0.113.50"


async def test_first_account_creates_record(db):
    record = await abuse_prevention_service.record_account_creation(IP, db)
    await db.commit()

    assert record.account_count == 1
    assert record.is_blocked is False
    assert not record.is_suspicious


async def test_increment_sees_writes_from_other_sessions(db, session_factory):
    # Loaded here, then counted up elsewhere
    await abuse_prevention_service.record_account_creation(IP, db)
    await db.commit()
    assert (await abuse_prevention_service.get_record(IP, db)).account_count == 1

    async with session_factory() as other:
        await abuse_prevention_service.record_account_creation(IP, other)
        await other.commit()

    record = await abuse_prevention_service.record_account_creation(IP, db)
    await db.commit()

    assert record.account_count == 3


async def test_simultaneous_sign_ups_from_new_address(file_session_factory):
    async def sign_up():
        async with file_session_factory() as session:
            await abuse_prevention_service.record_account_creation(IP, session)
            await session.commit()

    await asyncio.gather(*(sign_up() for _ in range(4)))

    async with file_session_factory() as session:
        rows = (await session.execute(select(func.count()).select_from(IPUsageRecord))).scalar()
        record = await abuse_prevention_service.get_record(IP, session)

    assert rows == 1
    assert record.account_count == 4
    assert record.is_suspicious


async def test_blocked_flag_survives_new_accounts(db):
    await abuse_prevention_service.set_blocked(IP, True, db)

    record = await abuse_prevention_service.record_account_creation(IP, db)
    await db.commit()

    assert record.is_blocked is True
    assert record.account_count == 1
