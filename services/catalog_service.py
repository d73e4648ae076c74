"""
services.catalog_service - Read-side listing of categories, suppliers
and materials.

All session management is the caller's responsibility (open before,
close after).
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from db.models import Category, Material, Supplier


class CatalogService:

    @staticmethod
    def list_named(session: Session, model, *, q: str = "",
                   limit: int = 100, offset: int = 0) -> tuple[list, int]:
        """Name-ordered page of Category or Supplier rows plus the total."""
        stmt = select(model)
        if q:
            stmt = stmt.where(model.name.ilike(f"%{q}%"))
        total = session.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()
        rows = session.execute(
            stmt.order_by(model.name).limit(limit).offset(offset)
        ).scalars().all()
        return list(rows), total

    @staticmethod
    def list_materials(session: Session, *, q: str = "", category: str = "",
                       supplier: str = "", limit: int = 100,
                       offset: int = 0) -> tuple[list[Material], int]:
        stmt = select(Material)
        if q:
            stmt = stmt.where(Material.name.ilike(f"%{q}%"))
        if category:
            stmt = stmt.join(Material.category).where(Category.name == category)
        if supplier:
            stmt = stmt.join(Material.supplier).where(Supplier.name == supplier)

        total = session.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()
        rows = session.execute(
            stmt.options(selectinload(Material.category),
                         selectinload(Material.supplier))
            .order_by(Material.name, Material.id)
            .limit(limit).offset(offset)
        ).scalars().all()
        return list(rows), total

    @staticmethod
    def counts(session: Session) -> dict:
        return {
            "total_materials": session.query(Material).count(),
            "total_categories": session.query(Category).count(),
            "total_suppliers": session.query(Supplier).count(),
        }
