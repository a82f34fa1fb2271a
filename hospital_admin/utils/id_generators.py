# hospital_admin/utils/id_generators.py
import logging
from typing import Callable, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import InstrumentedAttribute, Session

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NumberGenerationError(Exception):
    pass


def next_sequential_number(
    db: Session,
    column: InstrumentedAttribute,
    *,
    prefix: str,
    year: int,
) -> str:
    """
    Generate the next human-readable number in format: {prefix}-{year}-{sequential}

    Where:
    - {prefix} = e.g. "PAT" for patients, "BILL" for bills
    - {year}   = calendar year of registration
    - {sequential} = next number after the highest one issued this year,
      zero-padded to at least 4 digits (grows past 9999 instead of wrapping)

    Example: PAT-2024-0001, PAT-2024-0002, etc.

    The column must carry a unique constraint: two concurrent callers can
    compute the same value, and the loser's insert is what detects it.
    """
    base = f"{prefix}-{year}-"

    existing_numbers = db.query(column).filter(column.like(f"{base}%")).all()

    max_seq = 0
    for (number,) in existing_numbers:
        if number and number.startswith(base):
            try:
                max_seq = max(max_seq, int(number[len(base):]))
            except ValueError:
                continue

    return f"{base}{max_seq + 1:04d}"


def insert_with_generated_number(
    db: Session,
    column: InstrumentedAttribute,
    *,
    prefix: str,
    year: int,
    build: Callable[[str], T],
    attempts: int,
) -> T:
    """
    Insert the object returned by `build(number)` and commit.

    If the commit fails because another request took the same number, a
    fresh number is generated and the insert repeated, up to `attempts`
    times. Any other integrity error is re-raised untouched.
    """
    for attempt in range(1, attempts + 1):
        number = next_sequential_number(db, column, prefix=prefix, year=year)
        obj = build(number)
        db.add(obj)
        try:
            db.commit()
            return obj
        except IntegrityError:
            db.rollback()
            taken = db.query(column).filter(column == number).first()
            if not taken:
                raise
            logger.warning(
                "Number %s already taken (attempt %d/%d), generating another",
                number,
                attempt,
                attempts,
            )

    raise NumberGenerationError(f"Could not allocate a unique {prefix} number after {attempts} attempts")
