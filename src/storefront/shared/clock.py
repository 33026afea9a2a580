"""UTC helpers.

SQL providers hand datetimes back without tzinfo. Repositories pass every
entity they read through ``with_utc_datetimes`` so stored and fresh values
compare and serialise the same way.
"""

from datetime import UTC, datetime

from protean import atomic_change
from protean.fields import DateTime
from protean.utils.reflection import declared_fields


def utc_now() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def with_utc_datetimes(entity):
    """Attach UTC to the naive datetime fields of an entity read from a store.

    The entity stays clean unless it already carried unsaved changes.
    """
    was_changed = entity.state_.is_changed
    with atomic_change(entity):
        for name, field in declared_fields(entity).items():
            if not isinstance(field, DateTime):
                continue
            value = getattr(entity, name)
            if value is not None and value.tzinfo is None:
                setattr(entity, name, as_utc(value))
    if not was_changed and not entity.state_.is_new:
        entity.state_.mark_retrieved()
    return entity
