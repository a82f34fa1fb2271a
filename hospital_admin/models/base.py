# hospital_admin/models/base.py
from enum import Enum

from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all ORM models.
    """

    pass


def enum_column_type(enum_cls: type[Enum], name: str) -> SAEnum:
    """
    Enum column type that stores the enum *values* ("outpatient"), not the
    member names ("OUTPATIENT"), so rows read the same from SQL as from the API.
    """
    return SAEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
