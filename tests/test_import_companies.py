"""
Tests for the bulk company importer.
"""
import json

from industrin.models.company import Company
from industrin.scripts import import_companies as importer


RECORDS = [
    {
        "name": "Borås Hydraulservice AB",
        "city": "503 32 Borås",
        "categories": ["Hydraulik"],
        "country": "Sverige",
        "email": "info@borashydraul.se",
    },
    {"name": "Norsk Verksted AS", "city": "Oslo", "country": "Norge", "categories": []},
    {"name": "Okänd Ort AB", "city": "Ingenstans", "categories": []},
    {"name": "Rusty Support AB", "slug": "rusty-support-ab", "region": "Stockholm", "categories": []},
]


class TestRegionMapping:
    def test_known_city(self):
        assert importer.region_for_city("Göteborg") == "Västra Götaland"

    def test_postcode_prefix_and_extra_lines(self):
        assert importer.region_for_city("211 45 Malmö\nSkåne län") == "Skåne"

    def test_unknown_city_falls_back(self):
        assert importer.region_for_city("Ingenstans") == importer.FALLBACK_REGION
        assert importer.region_for_city(None) == "Övrigt"


class TestImport:
    def test_imports_swedish_records_only(self, db, companies):
        imported = importer.import_records(db, RECORDS)
        assert imported == 2

        boras = db.query(Company).filter(Company.slug == "boras-hydraulservice-ab").one()
        assert boras.region == "Västra Götaland"
        assert boras.categories == ["Hydraulik"]
        assert boras.contact_email == "info@borashydraul.se"

        unknown = db.query(Company).filter(Company.slug == "okand-ort-ab").one()
        assert unknown.region == "Övrigt"
        assert unknown.categories == [importer.DEFAULT_CATEGORY]
        assert unknown.location == "Ingenstans, Sverige"
        assert "industriföretag" in unknown.description

        assert db.query(Company).filter(Company.name == "Norsk Verksted AS").count() == 0

    def test_existing_slugs_are_skipped(self, db, companies):
        importer.import_records(db, RECORDS)
        assert importer.import_records(db, RECORDS) == 0
        assert db.query(Company).count() == 6

    def test_main_reads_file(self, db, tmp_path, monkeypatch):
        path = tmp_path / "companies.json"
        path.write_text(json.dumps(RECORDS[:1]), encoding="utf-8")
        seen = {}

        def fake_import(session, records):
            seen["records"] = records
            return len(records)

        monkeypatch.setattr(importer, "import_records", fake_import)
        assert importer.main([str(path)]) == 0
        assert seen["records"][0]["name"] == "Borås Hydraulservice AB"

    def test_main_without_arguments(self):
        assert importer.main([]) == 1
