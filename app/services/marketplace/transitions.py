# app/services/marketplace/transitions.py
from typing import Any, Dict, Iterable

from sqlalchemy import update
from sqlmodel import Session

from app.core.errors import StaleStateError


def guarded_update(
    session: Session,
    model,
    entity_id: int,
    expected: Iterable[Any],
    values: Dict[str, Any],
) -> None:
    """
    Apply ``values`` to one row only if its status is still in ``expected``.

    Raises StaleStateError when the row was changed by a concurrent writer
    since it was read. The caller owns the transaction and must roll back.
    """
    expected = list(expected)
    statement = (
        update(model)
        .where(model.id == entity_id, model.status.in_(expected))
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    result = session.exec(statement)
    if result.rowcount != 1:
        raise StaleStateError(
            f"{model.__name__} {entity_id} was modified concurrently; reload and retry"
        )
