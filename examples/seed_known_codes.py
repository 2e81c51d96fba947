from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from catalog_fallback.known_codes import seed_known_codes
from catalog_fallback.persistence.sqlalchemy import (
    SQLAlchemyUnitOfWork,
    build_engine,
    build_session_factory,
    create_schema,
)


def main() -> None:
    # Usage: python examples/seed_known_codes.py known.txt
    # Each line of known.txt reads "QUARTER: code code code-R".
    path = Path(sys.argv[1] if len(sys.argv) > 1 else "known.txt")
    engine = build_engine(os.environ.get("DATABASE_URL", "sqlite+pysqlite:///data.db"))
    create_schema(engine)
    session_factory = build_session_factory(engine)

    inserted = seed_known_codes(lambda: SQLAlchemyUnitOfWork(session_factory), path.read_text(encoding="utf-8"))
    print(f"inserted {inserted} mapping(s) from {path}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
