from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base collecting the metadata of every fanbase table."""
