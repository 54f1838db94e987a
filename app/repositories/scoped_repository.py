"""Base repository enforcing tenant isolation on every query."""

from typing import Generic, TypeVar

from sqlalchemy.orm import Session, Query

from app.core.exceptions import ForbiddenException
from app.database import apply_tenant_scope

ModelT = TypeVar("ModelT")


class TenantScopedRepository(Generic[ModelT]):
    """
    Repository bound to exactly one tenant.

    Every read goes through query(), which applies tenant_id as a mandatory
    equality filter, and every insert is stamped with the bound tenant_id
    regardless of what the caller set. Updates and deletes only ever receive
    rows that were fetched through the filter.

    A repository cannot be built without a tenant: writes with no resolvable
    tenant context fail closed instead of defaulting to any tenant.
    """

    model: type[ModelT]

    def __init__(self, db: Session, tenant_id: int | None):
        if tenant_id is None:
            raise ForbiddenException("No tenant context for this operation")
        self.db = db
        self.tenant_id = tenant_id
        apply_tenant_scope(db, tenant_id)

    def query(self) -> Query:
        return self.db.query(self.model).filter(self.model.tenant_id == self.tenant_id)

    def get_by_id(self, row_id: int) -> ModelT | None:
        """
        Get row ensuring it belongs to the bound tenant (multi-tenant safety).

        Returns None if the row doesn't exist or belongs to another tenant.
        """
        return self.query().filter(self.model.id == row_id).first()

    def get_many(self, row_ids: list[int]) -> list[ModelT]:
        if not row_ids:
            return []
        return self.query().filter(self.model.id.in_(row_ids)).all()

    def list_ordered(self) -> list[ModelT]:
        return self.query().order_by(self.model.position, self.model.id).all()

    def next_position(self) -> int:
        last = self.query().order_by(self.model.position.desc()).first()
        return last.position + 1 if last else 0

    def add(self, row: ModelT) -> ModelT:
        """Stamp tenant_id and stage the row. Does not commit."""
        row.tenant_id = self.tenant_id
        self.db.add(row)
        return row

    def create(self, row: ModelT) -> ModelT:
        """Create new row owned by the bound tenant"""
        self.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def update(self, row: ModelT) -> ModelT:
        """Update existing row"""
        row.tenant_id = self.tenant_id
        self.db.commit()
        self.db.refresh(row)
        return row

    def delete(self, row: ModelT) -> None:
        self.db.delete(row)
        self.db.commit()

    def reorder(self, ordered_ids: list[int], base_query: Query | None = None) -> None:
        """
        Assign positions 0..n-1 following ordered_ids.

        Ids that are not owned by the tenant (or not in base_query) are
        ignored, so a foreign id can never be touched.
        """
        query = base_query if base_query is not None else self.query()
        rows = {row.id: row for row in query.filter(self.model.id.in_(ordered_ids)).all()}
        position = 0
        for row_id in ordered_ids:
            row = rows.get(row_id)
            if row is None:
                continue
            row.position = position
            position += 1
        self.db.commit()
