import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from uuid import UUID
from typing import Dict, Any, List, Optional

from app.database.database import tenant_query
from app.modules.categories.models import Category
from app.modules.categories.schemas import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)


def build_category_tree(categories: List[Category]) -> List[Dict[str, Any]]:
    """
    Arborescence des catégories, triée par ``sort_order`` puis par nom.

    Une catégorie dont le parent ne figure pas dans la liste (parent archivé)
    n'apparaît pas dans l'arbre.
    """
    nodes = {
        category.id: {
            "id": category.id,
            "name": category.name,
            "parent_id": category.parent_id,
            "sort_order": category.sort_order,
            "icon": category.icon,
            "color": category.color,
            "is_archived": category.is_archived,
            "children": [],
        }
        for category in categories
    }

    roots = []
    for node in nodes.values():
        if node["parent_id"] is None:
            roots.append(node)
        elif node["parent_id"] in nodes:
            nodes[node["parent_id"]]["children"].append(node)

    def sort_nodes(items):
        items.sort(key=lambda item: (item["sort_order"], item["name"].casefold()))
        for item in items:
            sort_nodes(item["children"])

    sort_nodes(roots)
    return roots


class CategoryService:
    """Service de gestion des catégories"""

    def __init__(self, db: Session):
        self.db = db

    def get_category_tree(self, tenant_id: str, include_archived: bool = False) -> Dict[str, Any]:
        query = tenant_query(self.db, Category, tenant_id)
        if not include_archived:
            query = query.filter(Category.is_archived.is_(False))

        categories = query.all()
        return {"categories": build_category_tree(categories), "total_count": len(categories)}

    def get_category(self, category_id: UUID, tenant_id: str) -> Category:
        category = tenant_query(self.db, Category, tenant_id).filter(
            Category.id == category_id
        ).first()

        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Catégorie introuvable"
            )
        return category

    def _get_parent(self, parent_id: UUID, tenant_id: str) -> Category:
        parent = tenant_query(self.db, Category, tenant_id).filter(Category.id == parent_id).first()
        if not parent:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Catégorie parente introuvable"
            )
        return parent

    def _check_name_available(self, name: str, tenant_id: str, exclude_id: Optional[UUID] = None) -> None:
        query = tenant_query(self.db, Category, tenant_id).filter(Category.name == name)
        if exclude_id:
            query = query.filter(Category.id != exclude_id)

        if query.first():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Une catégorie nommée '{name}' existe déjà"
            )

    def _check_no_cycle(self, category: Category, parent: Category, tenant_id: str) -> None:
        """Le nouveau parent ne doit être ni la catégorie elle-même ni l'une de ses descendantes."""
        if parent.id == category.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Une catégorie ne peut pas être son propre parent"
            )

        seen = {parent.id}
        ancestor_id = parent.parent_id
        while ancestor_id is not None and ancestor_id not in seen:
            if ancestor_id == category.id:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Une catégorie ne peut pas être rattachée à l'une de ses sous-catégories"
                )
            seen.add(ancestor_id)
            ancestor = self._get_parent(ancestor_id, tenant_id)
            ancestor_id = ancestor.parent_id

    def create_category(self, data: CategoryCreate, tenant_id: str) -> Category:
        try:
            if data.parent_id:
                self._get_parent(data.parent_id, tenant_id)
            self._check_name_available(data.name, tenant_id)

            category = Category(tenant_id=tenant_id, **data.model_dump())
            self.db.add(category)
            self.db.commit()
            self.db.refresh(category)
            logger.info(f"Category created: {category.name} ({category.id}) tenant={tenant_id}")
            return category

        except HTTPException:
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Erreur d'intégrité en base de données"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error creating category")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la création de la catégorie"
            )

    def update_category(self, category_id: UUID, data: CategoryUpdate, tenant_id: str) -> Category:
        try:
            category = self.get_category(category_id, tenant_id)
            update_dict = data.model_dump(exclude_unset=True)

            if update_dict.get("parent_id") is not None:
                parent = self._get_parent(update_dict["parent_id"], tenant_id)
                self._check_no_cycle(category, parent, tenant_id)
            if "name" in update_dict:
                self._check_name_available(update_dict["name"], tenant_id, exclude_id=category.id)

            for field, value in update_dict.items():
                setattr(category, field, value)

            self.db.commit()
            self.db.refresh(category)
            logger.info(f"Category updated: {category.id} tenant={tenant_id}")
            return category

        except HTTPException:
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Erreur d'intégrité en base de données"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error updating category")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la mise à jour de la catégorie"
            )

    def archive_category(self, category_id: UUID, tenant_id: str) -> Category:
        """Archive une catégorie. Refusé tant qu'elle contient des sous-catégories actives."""
        try:
            category = self.get_category(category_id, tenant_id)

            children = tenant_query(self.db, Category, tenant_id).filter(
                Category.parent_id == category.id,
                Category.is_archived.is_(False)
            ).count()
            if children > 0:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Impossible de supprimer une catégorie contenant des sous-catégories"
                )

            if not category.is_archived:
                category.archive()

            self.db.commit()
            self.db.refresh(category)
            logger.info(f"Category archived: {category.name} tenant={tenant_id}")
            return category

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error archiving category")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la suppression de la catégorie"
            )
