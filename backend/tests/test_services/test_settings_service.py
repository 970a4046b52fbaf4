"""
Tests for SettingsService, LocationService and PublicationService.
"""

from datetime import datetime
from decimal import Decimal

import models.schemas as schemas
import repositories.db_models as db_models
from repositories.setting_repository import SettingRepository
from services.location_service import LocationService
from services.publication_service import PublicationService
from services.settings_service import SettingsService


class TestSettingsService:
    def test_defaults_without_rows(self, db_session):
        assert SettingsService.get_settings(db_session) == schemas.SystemSettings(
            auto_assign_complaints=True,
            email_confirmations=False,
            maintenance_mode=False,
        )

    def test_update_is_reported_back(self, db_session):
        SettingsService.update_setting(
            db_session, schemas.SettingUpdate(key="maintenance_mode", value=True)
        )
        assert SettingsService.get_settings(db_session).maintenance_mode is True
        assert SettingRepository(db_session).get_by_key("maintenance_mode").value == "true"

    def test_unknown_key_is_stored_but_not_reported(self, db_session):
        SettingsService.update_setting(
            db_session, schemas.SettingUpdate(key="dark_mode", value=True)
        )

        assert SettingRepository(db_session).get_values()["dark_mode"] == "true"
        assert "dark_mode" not in SettingsService.get_settings(db_session).model_dump()

    def test_seed_does_not_overwrite(self, db_session):
        SettingsService.update_setting(
            db_session, schemas.SettingUpdate(key="auto_assign_complaints", value=False)
        )
        SettingsService.seed_defaults(db_session)
        SettingsService.seed_defaults(db_session)

        assert SettingRepository(db_session).get_values() == {
            "auto_assign_complaints": "false",
            "email_confirmations": "false",
            "maintenance_mode": "false",
        }


class TestLocationService:
    def test_hierarchy(self, db_session, taxonomy):
        assert [z.code for z in LocationService.get_zones(db_session)] == ["CZ", "WZ"]
        assert [w.code for w in LocationService.get_wards(db_session, taxonomy["west"].id)] == ["W08"]
        assert [a.code for a in LocationService.get_areas(db_session, taxonomy["nanpura"].id)] == ["A02"]

    def test_unknown_parent_gives_empty_list(self, db_session, taxonomy):
        assert LocationService.get_wards(db_session, 999) == []


class TestPublicationService:
    def test_documents_newest_first(self, db_session):
        db_session.add_all(
            [
                db_models.Document(
                    title="Budget 2025",
                    file_url="/uploads/budget-2025.pdf",
                    created_at=datetime(2025, 4, 1),
                ),
                db_models.Document(
                    title="Budget 2026",
                    file_url="/uploads/budget-2026.pdf",
                    created_at=datetime(2026, 4, 1),
                ),
            ]
        )
        db_session.commit()

        titles = [d.title for d in PublicationService.list_documents(db_session)]
        assert titles == ["Budget 2026", "Budget 2025"]

    def test_projects_carry_names(self, db_session, public_works, taxonomy):
        db_session.add(
            db_models.Project(
                title="Ring Road resurfacing",
                department_id=public_works.id,
                ward_id=taxonomy["nanpura"].id,
                budget=Decimal("2500000.00"),
                progress=40,
            )
        )
        db_session.commit()

        project = PublicationService.list_projects(db_session)[0]
        assert project.department_name == "Public Works"
        assert project.ward_name == "Nanpura"
        assert project.budget == 2500000.0
        assert project.status == "planned"
