# catalog/database/database.py
import asyncpg
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple
from ..config import Config
from .collection import ACTIVE_UNIQUE_FIELDS, COLLECTION_FIELDS, Collection, UniqueViolation
from .filters import Condition, Filter, Op, Sort

def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

def _compile_condition(condition: Condition, params: List[Any]) -> str:
    column = f'"{condition.field}"'
    if condition.op is Op.EQ and condition.value is None:
        return f"{column} IS NULL"
    if condition.op is Op.ICONTAINS:
        params.append(f"%{_escape_like(str(condition.value))}%")
        return f"{column} ILIKE ${len(params)} ESCAPE '\\'"

    params.append(condition.value)
    placeholder = f"${len(params)}"
    if condition.op is Op.EQ:
        return f"{column} = {placeholder}"
    if condition.op is Op.NE:
        return f"{column} IS DISTINCT FROM {placeholder}"
    if condition.op is Op.IN:
        return f"{column} = ANY({placeholder})"
    if condition.op is Op.CONTAINS:
        return f"{placeholder} = ANY({column})"
    raise ValueError(f"Unsupported operator: {condition.op}")

def compile_filter(flt: Filter, params: Optional[List[Any]] = None) -> Tuple[str, List[Any]]:
    """Translate a Filter into a WHERE clause body and its positional parameters"""
    params = [] if params is None else params
    clauses = [_compile_condition(c, params) for c in flt.conditions]
    if flt.any_of:
        alternatives = [_compile_condition(c, params) for c in flt.any_of]
        clauses.append("(" + " OR ".join(alternatives) + ")")
    return (" AND ".join(clauses) or "TRUE"), params

def compile_sort(sort: Sort) -> str:
    if sort.descending:
        return f'ORDER BY "{sort.field}" DESC NULLS LAST'
    return f'ORDER BY "{sort.field}" ASC NULLS FIRST'

class PostgresCollection(Collection):
    """Collection backed by one PostgreSQL table per entity"""

    def __init__(self, name: str, database: "Database"):
        super().__init__(name, COLLECTION_FIELDS[name])
        self.database = database
        self.unique_fields = ACTIVE_UNIQUE_FIELDS[name]

    def _unique_violation(self, document: Mapping[str, Any]) -> UniqueViolation:
        field = self.unique_fields[0] if self.unique_fields else "id"
        return UniqueViolation(self.name, field, document.get(field))

    async def insert_one(self, document: Mapping[str, Any]) -> Dict[str, Any]:
        self.check_fields(document.keys())
        values = {k: v for k, v in document.items() if k not in ("id", "created_at", "updated_at")}
        values["id"] = str(uuid.uuid4())
        columns = list(values.keys())
        placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
        query = f"""
            INSERT INTO {self.name} ({', '.join(f'"{c}"' for c in columns)})
            VALUES ({placeholders})
            RETURNING *
        """
        async with self.database.pool.acquire() as conn:
            try:
                row = await conn.fetchrow(query, *values.values())
            except asyncpg.UniqueViolationError as e:
                raise self._unique_violation(document) from e
            return dict(row)

    async def find_one(self, flt: Filter) -> Optional[Dict[str, Any]]:
        self.check_fields(flt.fields())
        where, params = compile_filter(flt)
        async with self.database.pool.acquire() as conn:
            row = await conn.fetchrow(f"SELECT * FROM {self.name} WHERE {where} LIMIT 1", *params)
            return dict(row) if row else None

    async def find(
        self,
        flt: Filter,
        sort: Optional[Sort] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        self.check_fields(flt.fields())
        where, params = compile_filter(flt)
        query = f"SELECT * FROM {self.name} WHERE {where}"
        if sort is not None:
            self.check_fields([sort.field])
            query += " " + compile_sort(sort)
        params.append(max(skip or 0, 0))
        query += f" OFFSET ${len(params)}"
        if limit is not None:
            params.append(limit)
            query += f" LIMIT ${len(params)}"
        async with self.database.pool.acquire() as conn:
            rows = await conn.fetch(query, *params)
            return [dict(row) for row in rows]

    async def count(self, flt: Filter) -> int:
        self.check_fields(flt.fields())
        where, params = compile_filter(flt)
        async with self.database.pool.acquire() as conn:
            total = await conn.fetchval(f"SELECT COUNT(*) FROM {self.name} WHERE {where}", *params)
            return total or 0

    async def update_one(self, document_id: str, fields: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        self.check_fields(fields.keys())
        values = {k: v for k, v in fields.items() if k not in ("id", "created_at", "updated_at")}
        query_parts = []
        params = []
        for key, value in values.items():
            params.append(value)
            query_parts.append(f'"{key}" = ${len(params)}')
        query_parts.append("updated_at = NOW()")
        params.append(document_id)
        query = f"""
            UPDATE {self.name}
            SET {', '.join(query_parts)}
            WHERE id = ${len(params)}
            RETURNING *
        """
        async with self.database.pool.acquire() as conn:
            try:
                row = await conn.fetchrow(query, *params)
            except asyncpg.UniqueViolationError as e:
                raise self._unique_violation(fields) from e
            return dict(row) if row else None

class Database:
    """Database connection management"""

    def __init__(self, dsn: Optional[str] = None):
        self.dsn = dsn
        self.pool: Optional[asyncpg.Pool] = None
        self.logger = logging.getLogger(__name__)
        self._collections: Dict[str, PostgresCollection] = {}

    async def connect(self):
        """Open the pool and apply migrations"""
        try:
            self.pool = await asyncpg.create_pool(
                self.dsn or Config.require_database_url(),
                min_size=Config.DB_POOL_MIN_SIZE,
                max_size=Config.DB_POOL_MAX_SIZE
            )

            await self._run_migrations()

            self.logger.info("Connected to database")
        except Exception as e:
            self.logger.error(f"Database connection failed: {e}")
            raise

    async def close(self):
        """Close the pool"""
        if self.pool:
            await self.pool.close()
            self.logger.info("Database connection closed")

    def collection(self, name: str) -> PostgresCollection:
        if name not in COLLECTION_FIELDS:
            raise KeyError(f"Unknown collection: {name}")
        if name not in self._collections:
            self._collections[name] = PostgresCollection(name, self)
        return self._collections[name]

    async def _run_migrations(self):
        """Apply pending SQL migrations"""
        try:
            migrations_path = Path(__file__).parent / "migrations"

            async with self.pool.acquire() as conn:
                await conn.execute("""
                    CREATE TABLE IF NOT EXISTS migrations (
                        id SERIAL PRIMARY KEY,
                        name VARCHAR(255) NOT NULL,
                        applied_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP
                    )
                """)

                for migration_file in sorted(migrations_path.glob("*.sql")):
                    migration_name = migration_file.name

                    is_applied = await conn.fetchval(
                        "SELECT COUNT(*) FROM migrations WHERE name = $1",
                        migration_name
                    )

                    if not is_applied:
                        with open(migration_file) as f:
                            await conn.execute(f.read())

                        await conn.execute(
                            "INSERT INTO migrations (name) VALUES ($1)",
                            migration_name
                        )

                        self.logger.info(f"Migration {migration_name} applied")

        except Exception as e:
            self.logger.error(f"Migration failed: {e}")
            raise
