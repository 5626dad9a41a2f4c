"""
Seed script: create the demo tenant used for local development.

What it creates (skipping rows that already exist):
- Owner user with credentials.
- Establishment "Boutique Démo" with one register.
- Sellers (2) attached to the establishment.
- Standard French VAT rates T0-T4, T1 (20%) as default.
- Variation groups Taille / Couleur.

Run inside the API container:
    docker compose exec api python scripts/seed_demo_data.py \
        --tenant demo-tenant \
        --email demo@pos-demo.fr \
        --password Demo!2025

Note: This is intended for development environments only.
"""

# Add project root (/code) to sys.path so `app.*` imports work even if CWD changes
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import argparse
import logging

from app.core.config import settings
from app.database.database import SessionLocal, Base, engine
from app.main import import_models
from app.modules.seed.service import SeedService


def main():
    parser = argparse.ArgumentParser(description="Seed demo tenant data")
    parser.add_argument("--tenant", default=settings.DEMO_TENANT_ID)
    parser.add_argument("--email", default=settings.DEMO_EMAIL)
    parser.add_argument("--password", default=settings.DEMO_PASSWORD)
    parser.add_argument("--create-tables", action="store_true", help="Run create_all before seeding")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if settings.is_production:
        print("Refusing to seed a production database")
        sys.exit(1)

    if args.create_tables:
        import_models()
        Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        service = SeedService(db)
        results = service.seed(args.tenant, args.email, args.password)
    finally:
        db.close()

    print(f"Tenant: {service.tenant_id}")
    for key, counts in results.items():
        print(f"  {key:<18} added={counts['added']:<4} existing={counts['existing']}")
    print(f"Login: {args.email} / {args.password}")


if __name__ == "__main__":
    main()
