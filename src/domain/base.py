"""Shared base for SQLModel domain entities"""

from sqlalchemy import BigInteger, Column, Integer
from sqlmodel import SQLModel

# SQLite only autoincrements INTEGER PRIMARY KEY columns
IdType = BigInteger().with_variant(Integer(), "sqlite")


class BaseModel(SQLModel):
    """Base class for all table entities"""


def id_column() -> Column:
    """Auto-increment BIGINT primary key column"""
    return Column(IdType, primary_key=True, autoincrement=True)
