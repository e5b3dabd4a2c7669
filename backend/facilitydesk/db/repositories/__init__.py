from .base import DataSource, EntityRepository
from .memory import FixtureRepository, build_fixture_data_source
from .sql import SqlRepository, build_sql_data_source

__all__ = [
    "DataSource",
    "EntityRepository",
    "FixtureRepository",
    "SqlRepository",
    "build_fixture_data_source",
    "build_sql_data_source",
]
