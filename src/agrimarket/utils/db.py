"""Schema management for SQL-backed providers.

The memory provider needs no schema, so only ``sqlite`` and ``postgresql``
providers are touched.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

from agrimarket.utils.logging import get_logger

logger = get_logger(__name__)

SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for name, provider in domain.providers.items():
        if provider.conn_info["provider"] in SQL_PROVIDERS:
            yield name, provider


def setup_db(domain: Domain) -> None:
    """Create tables for every aggregate and entity of the domain"""
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])

            # Touching the DAO registers the table on the provider's metadata
            for _, record in domain.registry.aggregates.items():
                if record.cls.meta_.provider == name:
                    domain.repository_for(record.cls)._dao  # noqa: B018

            for _, record in domain.registry.entities.items():
                if record.cls.meta_.provider == name:
                    domain.repository_for(record.cls)._dao  # noqa: B018

            provider._metadata.create_all(engine)
            logger.info("schema_created", provider=name)


def drop_db(domain: Domain) -> None:
    """Drop every table known to the domain's SQL providers"""
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
            logger.info("schema_dropped", provider=name)
