"""Initialize the database with an admin user, default settings and a sample taxonomy.

Safe to run repeatedly: existing rows (matched by email or code) are left alone.
"""

from sqlalchemy.orm import Session

from authentication.auth import get_password_hash
from models.config import settings
from repositories.database import Base, SessionLocal, engine
from repositories.db_models import (
    Area,
    ComplaintCounter,
    Department,
    User,
    UserRole,
    Ward,
    Zone,
)
from services.settings_service import SettingsService

DEFAULT_DEPARTMENTS = [
    {"name": "Public Works", "code": "PWD", "description": "Roads, water, sewage"},
    {"name": "Engineering", "code": "ENG", "description": "Infrastructure"},
    {"name": "Environment", "code": "ENV", "description": "Garbage, parks"},
]

DEFAULT_ZONES = [
    {"name": "Central Zone", "code": "CZ"},
    {"name": "South Zone", "code": "SZ"},
    {"name": "West Zone", "code": "WZ"},
    {"name": "East Zone", "code": "EZ"},
]

# (name, code, zone code)
DEFAULT_WARDS = [
    ("Nanpura", "W01", "CZ"),
    ("Gopipura", "W02", "CZ"),
    ("Athwa", "W05", "SZ"),
    ("Udhna", "W06", "SZ"),
    ("Adajan", "W08", "WZ"),
    ("Piplod", "W09", "WZ"),
    ("Katargam", "W11", "EZ"),
    ("Varachha", "W12", "EZ"),
]

# (name, code, ward code)
DEFAULT_AREAS = [
    ("Nanpura Main Road", "A01", "W01"),
    ("Ring Road", "A02", "W01"),
    ("Gopipura Gate", "A04", "W02"),
    ("Athwa Gate", "A06", "W05"),
    ("City Light", "A07", "W05"),
    ("Udhna Darwaja", "A09", "W06"),
    ("Adajan Patiya", "A12", "W08"),
    ("Piplod Crossroad", "A15", "W09"),
    ("Katargam Darwaja", "A20", "W11"),
    ("Varachha Main Road", "A22", "W12"),
]


def seed_admin(db: Session) -> bool:
    """Create the bootstrap admin from ADMIN_EMAIL / ADMIN_PASSWORD. Returns True if created."""
    email = settings.ADMIN_EMAIL.strip().lower()
    if db.query(User).filter(User.email == email).first():
        return False
    db.add(
        User(
            email=email,
            hashed_password=get_password_hash(settings.ADMIN_PASSWORD),
            full_name="Administrator",
            role=UserRole.ADMIN,
        )
    )
    db.commit()
    return True


def seed_counter(db: Session) -> None:
    if db.get(ComplaintCounter, 1) is None:
        db.add(ComplaintCounter(id=1, seq=0))
        db.commit()


def seed_departments(db: Session) -> int:
    created = 0
    for data in DEFAULT_DEPARTMENTS:
        if not db.query(Department).filter(Department.code == data["code"]).first():
            db.add(Department(**data))
            created += 1
    db.commit()
    return created


def seed_locations(db: Session) -> None:
    """Zones, then wards under them, then areas under the wards."""
    zones = {}
    for data in DEFAULT_ZONES:
        zone = db.query(Zone).filter(Zone.code == data["code"]).first()
        if zone is None:
            zone = Zone(**data)
            db.add(zone)
        zones[data["code"]] = zone
    db.flush()

    wards = {}
    for name, code, zone_code in DEFAULT_WARDS:
        ward = db.query(Ward).filter(Ward.code == code).first()
        if ward is None:
            ward = Ward(name=name, code=code, zone_id=zones[zone_code].id)
            db.add(ward)
        wards[code] = ward
    db.flush()

    for name, code, ward_code in DEFAULT_AREAS:
        if not db.query(Area).filter(Area.code == code).first():
            db.add(Area(name=name, code=code, ward_id=wards[ward_code].id))
    db.commit()


def seed_all(db: Session) -> None:
    if seed_admin(db):
        print("[OK] Admin user created")
        print(f"  Email: {settings.ADMIN_EMAIL}")
        print("  Password: (from ADMIN_PASSWORD in .env)")
        print("  IMPORTANT: Change this password in production!")

    SettingsService.seed_defaults(db)
    print("[OK] System settings seeded")

    seed_counter(db)

    created = seed_departments(db)
    print(f"[OK] Departments seeded ({created} new)")

    seed_locations(db)
    print("[OK] Zones, wards and areas seeded")


def init_db() -> None:
    """Create tables and seed default data."""
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        seed_all(db)
        print("\n[OK] Database initialization complete!")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
