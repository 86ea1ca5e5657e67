import logging
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from mindjournal import database
from mindjournal.errors import ConflictError, PersistenceError
from mindjournal.models import models as db

logger = logging.getLogger("crud")


# --- Generic DB helpers ------------------------------------------------------

async def _commit_refresh(session, obj):
    await session.commit()
    await session.refresh(obj)
    return obj


# --- Journal Operations ------------------------------------------------------

async def create_journal(
    owner_id: str,
    content: str,
    *,
    emotion: str,
    confidence: float,
    suggestion: str,
) -> db.JournalEntry:
    """Persist one entry; id and created_at are assigned here."""
    if not owner_id:
        raise PersistenceError("Journal entry is missing its owner")
    if not content or not content.strip():
        raise PersistenceError("Journal entry content cannot be empty")

    try:
        async with database.AsyncSessionLocal() as dbs:
            journal = db.JournalEntry(
                owner_id=owner_id,
                content=content,
                emotion=emotion,
                confidence=confidence,
                suggestion=suggestion,
            )
            dbs.add(journal)
            await _commit_refresh(dbs, journal)
    except SQLAlchemyError as e:
        logger.exception("Failed to create journal entry for user %s", owner_id)
        raise PersistenceError() from e

    logger.info("Created journal %s for user %s", journal.id, owner_id)
    return journal


async def get_journals(owner_id: str) -> List[db.JournalEntry]:
    """All entries of one owner, newest first; equal timestamps fall back to id order."""
    try:
        async with database.AsyncSessionLocal() as dbs:
            result = await dbs.execute(
                select(db.JournalEntry)
                .where(db.JournalEntry.owner_id == owner_id)
                .order_by(desc(db.JournalEntry.created_at), desc(db.JournalEntry.id))
            )
            journals = list(result.scalars())
    except SQLAlchemyError as e:
        logger.exception("Failed to fetch journals for user %s", owner_id)
        raise PersistenceError("Failed to fetch journal entries") from e

    logger.info("Fetched %d journals for user %s", len(journals), owner_id)
    return journals


async def get_journal(journal_id: str, owner_id: str) -> Optional[db.JournalEntry]:
    """Single entry, only when it belongs to owner_id."""
    try:
        async with database.AsyncSessionLocal() as dbs:
            result = await dbs.execute(
                select(db.JournalEntry)
                .where(db.JournalEntry.id == journal_id)
                .where(db.JournalEntry.owner_id == owner_id)
            )
            journal = result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.exception("Failed to fetch journal %s", journal_id)
        raise PersistenceError("Failed to fetch journal entry") from e

    if journal is None:
        logger.warning("Journal %s not found for user %s", journal_id, owner_id)
    return journal


# --- User Operations ---------------------------------------------------------

async def create_user(username: str, email: str, password_hash: str) -> db.User:
    try:
        async with database.AsyncSessionLocal() as dbs:
            user = db.User(username=username, email=email, password_hash=password_hash)
            dbs.add(user)
            await _commit_refresh(dbs, user)
    except IntegrityError as e:
        # Lost a race with a concurrent registration
        logger.warning("Duplicate registration attempt for %s", email)
        raise ConflictError("User with this email or username already exists") from e
    except SQLAlchemyError as e:
        logger.exception("Failed to create user %s", username)
        raise PersistenceError("Registration failed") from e

    logger.info("Created user %s", user.id)
    return user


async def _get_user_where(clause) -> Optional[db.User]:
    try:
        async with database.AsyncSessionLocal() as dbs:
            result = await dbs.execute(select(db.User).where(clause))
            return result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.exception("User lookup failed")
        raise PersistenceError("Failed to load user") from e


async def get_user(user_id: str) -> Optional[db.User]:
    return await _get_user_where(db.User.id == user_id)


async def get_user_by_email(email: str) -> Optional[db.User]:
    return await _get_user_where(db.User.email == email.lower())


async def get_user_by_username(username: str) -> Optional[db.User]:
    return await _get_user_where(db.User.username == username)
