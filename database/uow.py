import contextlib
import logging

from sqlalchemy.orm import sessionmaker

from database.repository import Repository

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def power_match_uow(session_factory: sessionmaker):
    """Per-unit-of-work transaction scope.

    Yields a Repository bound to a fresh Session from the process-wide
    session factory. Commits on success, rolls back on exception, always
    closes.

    Usage:
        with power_match_uow(session_factory) as repo:
            match = repo.power_matches.get_by_id(match_id)
            # perform operations...
        # commit happens automatically on successful exit
    """
    session = session_factory()
    try:
        repo = Repository(session)
        yield repo
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
