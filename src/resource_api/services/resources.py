"""Resource service - validation and SQL for the resources table."""

from typing import Any

from ..database import SQL_NOW, Row, Store
from ..exceptions import NotFoundError, ResourceAPIError, StorageError, ValidationError
from ..logging_config import get_logger
from ..schemas import (
    DEFAULT_CATEGORY,
    DEFAULT_STATUS,
    RESOURCE_STATUSES,
    Pagination,
    ResourceCreate,
    ResourceFilters,
    ResourcePatch,
    ResourceRead,
    ResourceUpdate,
    ServiceResult,
)

logger = get_logger(__name__)

STATUS_MESSAGE = 'Status must be either "active" or "inactive"'

SELECT_BY_ID = "SELECT * FROM resources WHERE id = :id"

SQLITE_INTEGER_MIN = -(2**63)
SQLITE_INTEGER_MAX = 2**63 - 1


def _is_blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


def _check_status(status: str | None) -> str:
    if status not in RESOURCE_STATUSES:
        raise ValidationError(STATUS_MESSAGE)
    return status


def _parse_id(resource_id: int | str) -> int:
    """Only plain ASCII decimal ids within SQLite INTEGER range can match a row."""
    if isinstance(resource_id, int):
        value = resource_id
    else:
        digits = resource_id[1:] if resource_id.startswith("-") else resource_id
        if not (digits.isascii() and digits.isdigit()):
            raise NotFoundError()
        value = int(resource_id)
    if not SQLITE_INTEGER_MIN <= value <= SQLITE_INTEGER_MAX:
        raise NotFoundError()
    return value


def _to_resource(row: Row) -> ResourceRead:
    return ResourceRead.model_validate(row)


class ResourceService:
    """CRUD operations over the resources table.

    Every public method returns a ServiceResult; expected failures never
    escape as exceptions. Rows are never cached, each call re-queries the store.
    """

    def __init__(self, store: Store):
        self.store = store

    def _fail(self, operation: str, error: ResourceAPIError, **context: Any) -> ServiceResult:
        if isinstance(error, StorageError):
            logger.error(
                "resource_operation_failed",
                operation=operation,
                error=error.message,
                exc_info=error,
                **context,
            )
        else:
            logger.info(
                "resource_operation_rejected",
                operation=operation,
                error=error.message,
                error_kind=error.kind,
                **context,
            )
        return ServiceResult.failure(error.message, error.kind)

    async def _get_row(self, resource_id: int) -> Row:
        row = await self.store.query_one(SELECT_BY_ID, {"id": resource_id})
        if row is None:
            raise NotFoundError()
        return row

    async def list_resources(self, filters: ResourceFilters | None = None) -> ServiceResult:
        """List resources matching all provided filters, newest first."""
        filters = filters or ResourceFilters()
        clauses: list[str] = []
        params: dict[str, Any] = {}

        if filters.category:
            # instr() is case-sensitive, LIKE is not
            clauses.append("instr(category, :category) > 0")
            params["category"] = filters.category

        if filters.status:
            clauses.append("status = :status")
            params["status"] = filters.status

        if filters.search:
            clauses.append("(name LIKE :search OR description LIKE :search)")
            params["search"] = f"%{filters.search}%"

        sql = "SELECT * FROM resources"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY created_at DESC, id DESC"

        try:
            rows = await self.store.query_all(sql, params)
        except ResourceAPIError as e:
            return self._fail("list_resources", e, filters=filters.model_dump(exclude_none=True))

        resources = [_to_resource(row) for row in rows]
        return ServiceResult(
            success=True,
            data=resources,
            pagination=Pagination(total=len(resources), count=len(resources)),
        )

    async def get_by_id(self, resource_id: int | str) -> ServiceResult:
        """Get resource by ID."""
        try:
            row = await self._get_row(_parse_id(resource_id))
        except ResourceAPIError as e:
            return self._fail("get_by_id", e, resource_id=resource_id)
        return ServiceResult(success=True, data=_to_resource(row))

    async def create(self, data: ResourceCreate) -> ServiceResult:
        """Create a new resource.

        Description only has to be non-empty as sent; a whitespace-only
        description is accepted and stored trimmed.
        """
        try:
            if _is_blank(data.name):
                raise ValidationError("Name is required")
            if not data.description:
                raise ValidationError("Description is required")
            status = _check_status(data.status or DEFAULT_STATUS)

            result = await self.store.execute(
                """
                INSERT INTO resources (name, description, category, status)
                VALUES (:name, :description, :category, :status)
                """,
                {
                    "name": data.name.strip(),
                    "description": data.description.strip(),
                    "category": data.category or DEFAULT_CATEGORY,
                    "status": status,
                },
            )
            row = await self._get_row(result.last_insert_id)
        except ResourceAPIError as e:
            return self._fail("create", e)

        logger.info("resource_created", resource_id=row["id"], category=row["category"])
        return ServiceResult(
            success=True,
            data=_to_resource(row),
            message="Resource created successfully",
        )

    async def replace(self, resource_id: int | str, data: ResourceUpdate) -> ServiceResult:
        """Replace a resource (PUT).

        Category and status are reset to the provided value or the default,
        never to the previously stored value.
        """
        try:
            rid = _parse_id(resource_id)
            await self._get_row(rid)

            if _is_blank(data.name):
                raise ValidationError("Name is required for PUT operation")
            if _is_blank(data.description):
                raise ValidationError("Description is required for PUT operation")
            status = _check_status(data.status or DEFAULT_STATUS)

            await self.store.execute(
                f"""
                UPDATE resources
                SET name = :name, description = :description, category = :category,
                    status = :status, updated_at = {SQL_NOW}
                WHERE id = :id
                """,
                {
                    "name": data.name.strip(),
                    "description": data.description.strip(),
                    "category": data.category or DEFAULT_CATEGORY,
                    "status": status,
                    "id": rid,
                },
            )
            row = await self._get_row(rid)
        except ResourceAPIError as e:
            return self._fail("replace", e, resource_id=resource_id)

        logger.info("resource_replaced", resource_id=rid)
        return ServiceResult(
            success=True,
            data=_to_resource(row),
            message="Resource updated successfully",
        )

    async def patch(self, resource_id: int | str, data: ResourcePatch | None = None) -> ServiceResult:
        """Partial update (PATCH): only supplied fields change."""
        supplied = data.supplied_fields() if data is not None else {}
        try:
            rid = _parse_id(resource_id)
            existing = await self._get_row(rid)

            updates: list[str] = []
            params: dict[str, Any] = {"id": rid}

            if "name" in supplied:
                if _is_blank(supplied["name"]):
                    raise ValidationError("Name cannot be empty")
                updates.append("name = :name")
                params["name"] = supplied["name"].strip()

            if "description" in supplied:
                if _is_blank(supplied["description"]):
                    raise ValidationError("Description cannot be empty")
                updates.append("description = :description")
                params["description"] = supplied["description"].strip()

            if "category" in supplied:
                updates.append("category = :category")
                params["category"] = supplied["category"] or DEFAULT_CATEGORY

            if "status" in supplied:
                updates.append("status = :status")
                params["status"] = _check_status(supplied["status"])

            if not updates:
                return ServiceResult(
                    success=True,
                    data=_to_resource(existing),
                    message="No changes made",
                )

            updates.append(f"updated_at = {SQL_NOW}")
            await self.store.execute(
                f"UPDATE resources SET {', '.join(updates)} WHERE id = :id",
                params,
            )
            row = await self._get_row(rid)
        except ResourceAPIError as e:
            return self._fail("patch", e, resource_id=resource_id)

        logger.info("resource_patched", resource_id=rid, fields=sorted(supplied))
        return ServiceResult(
            success=True,
            data=_to_resource(row),
            message="Resource patched successfully",
        )

    async def delete(self, resource_id: int | str) -> ServiceResult:
        """Delete a resource."""
        try:
            rid = _parse_id(resource_id)
            await self._get_row(rid)
            await self.store.execute("DELETE FROM resources WHERE id = :id", {"id": rid})
        except ResourceAPIError as e:
            return self._fail("delete", e, resource_id=resource_id)

        logger.info("resource_deleted", resource_id=rid)
        return ServiceResult(success=True, message="Resource deleted successfully")

    async def clear_all(self) -> ServiceResult:
        """Remove every resource and reset ids. Used for test isolation."""
        try:
            await self.store.clear_all()
        except ResourceAPIError as e:
            return self._fail("clear_all", e)
        return ServiceResult(success=True, message="All data cleared")
