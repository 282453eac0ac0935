"""
Change feed
Counts committed writes per business table so open pages can poll for
changes and reload, instead of holding a push connection.

Every flush that inserts, updates or deletes a watched row bumps that
table's TableRevision in the same database transaction, so a revision is
only visible once the write it describes is committed.
"""

from datetime import datetime
from sqlalchemy import event
from sqlalchemy.orm import Session
from stockplus.utils.logger import get_logger

logger = get_logger("stockplus.domain.core.change_feed")

# Order matters: the change token lists revisions in this order
WATCHED_TABLES = ('items', 'stock_transactions', 'employees', 'production_records')

_listeners_registered = False


def touch(session, *table_names):
    """
    Mark tables as changed by writes the unit of work cannot see,
    such as bulk UPDATE statements. Consumed by the next flush.
    """
    session.info.setdefault('change_feed_touched', set()).update(table_names)


def _changed_tables(session):
    tables = set(session.info.pop('change_feed_touched', set()))
    for obj in session.new:
        tables.add(getattr(obj, '__tablename__', None))
    for obj in session.deleted:
        tables.add(getattr(obj, '__tablename__', None))
    for obj in session.dirty:
        if session.is_modified(obj, include_collections=False):
            tables.add(getattr(obj, '__tablename__', None))
    return tables.intersection(WATCHED_TABLES)


def _bump_revisions(session, flush_context, instances):
    tables = _changed_tables(session)
    if not tables:
        return

    from stockplus.data.core.table_revision import TableRevision

    with session.no_autoflush:
        for table_name in sorted(tables):
            revision = session.query(TableRevision).filter_by(table_name=table_name).first()
            if revision is None:
                revision = TableRevision(table_name=table_name, revision=0)
                session.add(revision)
            revision.revision = (revision.revision or 0) + 1
            revision.changed_at = datetime.utcnow()
    logger.debug(f"Change feed bumped revisions for: {', '.join(sorted(tables))}")


def register_change_listeners():
    """Attach the flush listener once per process"""
    global _listeners_registered
    if _listeners_registered:
        return
    event.listen(Session, 'before_flush', _bump_revisions)
    _listeners_registered = True
    logger.debug("Change feed listeners registered")


class ChangeFeed:
    """
    Read side of the change feed.

    A token is the dot-joined list of revisions for WATCHED_TABLES,
    e.g. "4.12.2.7". Clients keep the last token they saw and ask which
    tables moved since then.
    """

    @staticmethod
    def snapshot():
        from stockplus.data.core.table_revision import TableRevision

        revisions = {name: 0 for name in WATCHED_TABLES}
        for row in TableRevision.query.filter(TableRevision.table_name.in_(WATCHED_TABLES)).all():
            revisions[row.table_name] = row.revision or 0
        return revisions

    @staticmethod
    def encode_token(revisions):
        return ".".join(str(revisions.get(name, 0)) for name in WATCHED_TABLES)

    @staticmethod
    def decode_token(token):
        """
        Parse a token back into revisions.

        Returns None for a missing or malformed token, which callers treat
        as "everything changed".
        """
        if not token:
            return None
        parts = token.split(".")
        if len(parts) != len(WATCHED_TABLES):
            return None
        try:
            return {name: int(part) for name, part in zip(WATCHED_TABLES, parts)}
        except ValueError:
            return None

    @classmethod
    def changes_since(cls, token):
        current = cls.snapshot()
        previous = cls.decode_token(token)
        if previous is None:
            changed = list(WATCHED_TABLES)
        else:
            changed = [name for name in WATCHED_TABLES if current[name] != previous[name]]
        return {
            'token': cls.encode_token(current),
            'revisions': current,
            'changed': changed,
        }
