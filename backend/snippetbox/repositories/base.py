"""
SnippetBox Backend — Repository Base
======================================

What:  Shared session handling for every repository.
How:   `_transaction()` wraps a multi-step write: commit when the block
       finishes, roll back when anything inside it raises.

Error Translation:
    IntegrityError    → rolled back, ConflictError when the caller supplied a
                        conflict message, otherwise DatabaseError
    SQLAlchemyError   → rolled back, DatabaseError (details logged only)
    anything else     → rolled back, re-raised unchanged (SnippetBoxError included)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from snippetbox.exceptions import ConflictError, DatabaseError

logger = logging.getLogger(__name__)


class BaseRepository:
    """Holds the injected session and the transaction helper."""

    def __init__(self, session: AsyncSession):
        self._session = session

    @property
    def session(self) -> AsyncSession:
        return self._session

    @asynccontextmanager
    async def _transaction(
        self,
        operation: str,
        conflict_message: Optional[str] = None,
    ) -> AsyncIterator[AsyncSession]:
        """
        Run the enclosed writes atomically.

        Args:
            operation: Short description used in logs ("create snippet")
            conflict_message: If set, a unique-constraint failure becomes a
                ConflictError with this message instead of a DatabaseError

        Example:
            async with self._transaction("delete tag"):
                await self._session.execute(delete(...))
        """
        try:
            yield self._session
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            if conflict_message:
                logger.info("Conflict during %s: %s", operation, type(e).__name__)
                raise ConflictError(message=conflict_message) from e
            logger.error("Integrity error during %s: %s", operation, str(e))
            raise DatabaseError(
                context={"operation": operation, "original_error": type(e).__name__},
            ) from e
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error("Database error during %s: %s", operation, str(e), exc_info=True)
            raise DatabaseError(
                context={"operation": operation, "original_error": type(e).__name__},
            ) from e
        except Exception:
            await self._session.rollback()
            raise
