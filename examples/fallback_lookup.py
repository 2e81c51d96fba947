from __future__ import annotations

import asyncio
import logging
import os
import sys

from catalog_fallback import CatalogApiClient, CatalogApiConfig, CatalogLookup, ImageProbe, QuarterSearch
from catalog_fallback.persistence.sqlalchemy import (
    SQLAlchemyUnitOfWork,
    build_engine,
    build_session_factory,
    create_schema,
)


async def main(raw_code: str) -> None:
    engine = build_engine(os.environ.get("DATABASE_URL", "sqlite+pysqlite:///data.db"))
    create_schema(engine)
    session_factory = build_session_factory(engine)

    def uow_factory():
        return SQLAlchemyUnitOfWork(session_factory)

    probe = ImageProbe()
    lookup = CatalogLookup(
        api=CatalogApiClient(CatalogApiConfig(domain=os.environ.get("CATALOG_API_DOMAIN", "api.amiami.com"))),
        search=QuarterSearch(uow_factory=uow_factory, probe=probe),
        probe=probe,
        uow_factory=uow_factory,
    )
    try:
        result = await asyncio.wait_for(lookup.lookup(raw_code), timeout=60)
    finally:
        engine.dispose()

    print("status:", result.status)
    print("quarter:", result.quarter)
    print("image:", result.image_url)
    if result.item is not None:
        print("name:", result.item.name, "(partial)" if result.partial else "")
    if result.reason:
        print("reason:", result.reason)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "FIGURE-123456"))
