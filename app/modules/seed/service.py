"""
Données de démonstration: un tenant prêt à l'emploi.

Idempotent: chaque ligne est recherchée par sa clé naturelle (email, nom,
code) avant insertion; un second passage ne crée rien.
"""
import logging
from decimal import Decimal
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from typing import Dict

from app.database.database import tenant_query
from app.modules.auth.models import User
from app.modules.auth.utils import hash_password
from app.modules.establishments.models import Establishment
from app.modules.registers.models import Register
from app.modules.sellers.models import Seller, SellerEstablishment
from app.modules.tax_rates.models import TaxRate
from app.modules.variations.models import VariationGroup, Variation

logger = logging.getLogger(__name__)

DEMO_ESTABLISHMENT = {
    "name": "Boutique Démo",
    "address": "12 rue de la Paix",
    "postal_code": "75002",
    "city": "Paris",
    "country": "France",
}

DEMO_REGISTERS = ["Caisse 1"]

DEMO_SELLERS = [
    {"code": "V001", "name": "Alice"},
    {"code": "V002", "name": "Bruno"},
]

# Taux de TVA français standards
TAX_RATES_DATA = [
    {"code": "T1", "name": "TVA 20%", "rate": Decimal("20.00"), "description": "Taux normal", "is_default": True},
    {"code": "T2", "name": "TVA 10%", "rate": Decimal("10.00"), "description": "Taux intermédiaire", "is_default": False},
    {"code": "T3", "name": "TVA 5.5%", "rate": Decimal("5.50"), "description": "Taux réduit", "is_default": False},
    {"code": "T4", "name": "TVA 2.1%", "rate": Decimal("2.10"), "description": "Taux super réduit", "is_default": False},
    {"code": "T0", "name": "TVA 0%", "rate": Decimal("0.00"), "description": "Exonéré", "is_default": False},
]

VARIATION_GROUPS = {
    "Taille": ["XS", "S", "M", "L", "XL"],
    "Couleur": ["Noir", "Blanc", "Rouge", "Bleu"],
}

RESULT_KEYS = ("users", "establishments", "registers", "sellers", "tax_rates", "variation_groups", "variations")


class SeedService:
    def __init__(self, db: Session):
        self.db = db
        self.results: Dict[str, Dict[str, int]] = {key: {"added": 0, "existing": 0} for key in RESULT_KEYS}
        self.tenant_id = None

    def _count(self, key: str, added: bool):
        self.results[key]["added" if added else "existing"] += 1

    def seed_user(self, tenant_id: str, email: str, password: str, full_name: str = "Propriétaire Démo") -> User:
        email = email.strip().lower()
        user = self.db.query(User).filter(User.email == email).first()
        if user:
            self._count("users", False)
            return user

        user = User(
            tenant_id=tenant_id,
            email=email,
            password=hash_password(password),
            full_name=full_name,
            role="owner",
            is_active=True,
        )
        self.db.add(user)
        self.db.flush()
        self._count("users", True)
        logger.info(f"Seed: user {email} created for tenant {tenant_id}")
        return user

    def seed_establishment(self, tenant_id: str) -> Establishment:
        establishment = tenant_query(self.db, Establishment, tenant_id).filter(
            Establishment.name == DEMO_ESTABLISHMENT["name"]
        ).first()
        if establishment:
            self._count("establishments", False)
            return establishment

        establishment = Establishment(tenant_id=tenant_id, is_active=True, **DEMO_ESTABLISHMENT)
        self.db.add(establishment)
        self.db.flush()
        self._count("establishments", True)
        return establishment

    def seed_registers(self, tenant_id: str, establishment: Establishment):
        for name in DEMO_REGISTERS:
            exists = tenant_query(self.db, Register, tenant_id).filter(
                Register.establishment_id == establishment.id,
                Register.name == name
            ).first()
            if exists:
                self._count("registers", False)
                continue
            self.db.add(Register(tenant_id=tenant_id, establishment_id=establishment.id, name=name))
            self._count("registers", True)

    def seed_sellers(self, tenant_id: str, establishment: Establishment):
        for data in DEMO_SELLERS:
            exists = tenant_query(self.db, Seller, tenant_id).filter(Seller.code == data["code"]).first()
            if exists:
                self._count("sellers", False)
                continue
            seller = Seller(tenant_id=tenant_id, is_active=True, **data)
            seller.establishment_links.append(
                SellerEstablishment(tenant_id=tenant_id, establishment_id=establishment.id)
            )
            self.db.add(seller)
            self._count("sellers", True)

    def seed_tax_rates(self, tenant_id: str):
        has_default = tenant_query(self.db, TaxRate, tenant_id).filter(
            TaxRate.is_default.is_(True)
        ).first() is not None

        for data in TAX_RATES_DATA:
            exists = tenant_query(self.db, TaxRate, tenant_id).filter(TaxRate.code == data["code"]).first()
            if exists:
                self._count("tax_rates", False)
                continue
            values = dict(data)
            # Un seul taux par défaut par tenant
            if values["is_default"] and has_default:
                values["is_default"] = False
            has_default = has_default or values["is_default"]
            self.db.add(TaxRate(tenant_id=tenant_id, **values))
            self.db.flush()
            self._count("tax_rates", True)

    def seed_variations(self, tenant_id: str):
        for group_name, names in VARIATION_GROUPS.items():
            group = tenant_query(self.db, VariationGroup, tenant_id).filter(
                VariationGroup.name == group_name
            ).first()
            if group:
                self._count("variation_groups", False)
            else:
                group = VariationGroup(tenant_id=tenant_id, name=group_name)
                self.db.add(group)
                self.db.flush()
                self._count("variation_groups", True)

            for position, name in enumerate(names):
                exists = tenant_query(self.db, Variation, tenant_id).filter(
                    Variation.group_id == group.id,
                    Variation.name == name
                ).first()
                if exists:
                    self._count("variations", False)
                    continue
                self.db.add(Variation(tenant_id=tenant_id, group_id=group.id, name=name, sort_order=position))
                self._count("variations", True)

    def seed(self, tenant_id: str, email: str, password: str) -> Dict[str, Dict[str, int]]:
        """Peuple le tenant de démonstration en une seule transaction."""
        try:
            user = self.seed_user(tenant_id, email, password)
            # Un compte existant garde son tenant
            tenant_id = self.tenant_id = user.tenant_id

            establishment = self.seed_establishment(tenant_id)
            self.seed_registers(tenant_id, establishment)
            self.seed_sellers(tenant_id, establishment)
            self.seed_tax_rates(tenant_id)
            self.seed_variations(tenant_id)

            self.db.commit()
            logger.info(f"Seed completed for tenant {tenant_id}: {self.results}")
            return self.results

        except Exception:
            self.db.rollback()
            logger.exception("Error seeding database")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors du seed de la base de données"
            )
