"""
Catalog persistence

Stores entity records in a relational table. List fields are kept as
pipe-joined strings. The running session always scores against the
in-memory seed catalog; this store only honours seeding and counting.
"""
from typing import List, Optional

from sqlalchemy import String, Text, create_engine, delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.types import TypeDecorator

from possessao.core.catalog import sample_entities
from possessao.core.entities import EntityDefinition
from possessao.utils.config import settings
from possessao.utils.logger import get_logger
from possessao.utils.exceptions import CatalogError

logger = get_logger(__name__)


class PipeList(TypeDecorator):
    """List[str] <-> "a|b|c" """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return "|".join(value) if value else ""

    def process_result_value(self, value, dialect):
        return value.split("|") if value else []


class Base(DeclarativeBase):
    pass


class EntityRecord(Base):
    """Row form of an EntityDefinition"""

    __tablename__ = "entities"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(128))
    culture: Mapped[str] = mapped_column(String(128))
    traits: Mapped[List[str]] = mapped_column(PipeList)
    description: Mapped[str] = mapped_column(Text)
    traditions: Mapped[List[str]] = mapped_column(PipeList)
    references: Mapped[List[str]] = mapped_column(PipeList)
    affected_genders: Mapped[List[str]] = mapped_column(PipeList, default=list)
    affected_age_groups: Mapped[List[str]] = mapped_column(PipeList, default=list)

    @classmethod
    def from_definition(cls, entity: EntityDefinition) -> "EntityRecord":
        return cls(
            id=entity.id,
            name=entity.name,
            culture=entity.culture,
            traits=list(entity.traits),
            description=entity.description,
            traditions=list(entity.traditions),
            references=list(entity.references),
            affected_genders=sorted(entity.affected_genders),
            affected_age_groups=sorted(entity.affected_age_groups),
        )

    def to_definition(self) -> EntityDefinition:
        return EntityDefinition(
            id=self.id,
            name=self.name,
            culture=self.culture,
            traits=tuple(self.traits),
            description=self.description,
            traditions=tuple(self.traditions),
            references=tuple(self.references),
            affected_genders=frozenset(self.affected_genders),
            affected_age_groups=frozenset(self.affected_age_groups),
        )


class EntityRepository:
    """
    Data access for the entity table
    Seeding operations are idempotent
    """

    def __init__(self, database_url: Optional[str] = None):
        """
        Initialize repository

        Args:
            database_url: SQLAlchemy URL (uses config if None)
        """
        self.database_url = database_url or settings.DATABASE_URL
        self.engine = create_engine(self.database_url)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        Base.metadata.create_all(self.engine)
        logger.info(f"EntityRepository initialized: {self.engine.url.render_as_string(hide_password=True)}")

    def _session(self) -> Session:
        return self._session_factory()

    def get_all(self) -> List[EntityDefinition]:
        try:
            with self._session() as session:
                records = session.scalars(select(EntityRecord).order_by(EntityRecord.id)).all()
                return [r.to_definition() for r in records]
        except SQLAlchemyError as e:
            raise CatalogError(f"Failed to read entities: {e}")

    def count(self) -> int:
        try:
            with self._session() as session:
                return session.scalar(select(func.count()).select_from(EntityRecord)) or 0
        except SQLAlchemyError as e:
            raise CatalogError(f"Failed to count entities: {e}")

    def insert_all(self, entities: List[EntityDefinition]) -> None:
        """Insert or replace records by id"""
        try:
            with self._session() as session, session.begin():
                for entity in entities:
                    session.merge(EntityRecord.from_definition(entity))
        except SQLAlchemyError as e:
            raise CatalogError(f"Failed to insert entities: {e}")

    def delete_all(self) -> None:
        try:
            with self._session() as session, session.begin():
                session.execute(delete(EntityRecord))
        except SQLAlchemyError as e:
            raise CatalogError(f"Failed to delete entities: {e}")

    def seed_if_empty(self) -> bool:
        """Populate with the seed list only when the table is empty"""
        if self.count() > 0:
            return False
        self.insert_all(sample_entities())
        logger.info("Entity table seeded")
        return True

    def replace_with_sample_if_below(self, min_count: int) -> bool:
        """Reset to the seed list when fewer than min_count records exist"""
        current = self.count()
        if current >= min_count:
            return False
        self.delete_all()
        self.insert_all(sample_entities())
        logger.info(f"Entity table reseeded ({current} < {min_count})")
        return True


# Global repository instance
_entity_repository: Optional[EntityRepository] = None


def get_entity_repository() -> EntityRepository:
    """Get entity repository instance (singleton)"""
    global _entity_repository
    if _entity_repository is None:
        _entity_repository = EntityRepository()
    return _entity_repository
