import json
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from goodwave.import_data import (
    import_records,
    main,
    photo_url,
    record_to_spot,
    to_string_list,
)


def _record(destination="Pipeline", identifier=None):
    return {
        "id": identifier if identifier is not None else str(ObjectId()),
        "fields": {
            "Destination": destination,
            "Address": "Ke Nui Rd, Haleiwa",
            "Destination State/Country": "Oahu, Hawaii",
            "Difficulty Level": 4.0,
            "Surf Break": ["Reef Break"],
            "Peak Surf Season Begins": "2018-07-22",
            "Peak Surf Season Ends": "2018-08-31",
            "Photos": [{"url": "https://example.com/pipe.jpg"}],
            "Magic Seaweed Link": "https://example.com/pipeline",
            "Geocode": "geo",
        },
        "createdTime": "2018-05-31T00:16:16.000Z",
    }


class FakeCollection:
    def __init__(self, existing=(), failing=(), clear_on_drop=True):
        self.documents = list(existing)
        self.failing = set(failing)
        self.clear_on_drop = clear_on_drop
        self.calls = []

    def drop(self):
        self.calls.append("drop")
        if self.clear_on_drop:
            self.documents.clear()

    def find_one(self, query):
        self.calls.append("find_one")
        for document in self.documents:
            if all(document.get(key) == value for key, value in query.items()):
                return document
        return None

    def insert_one(self, document):
        self.calls.append("insert_one")
        if document["destination"] in self.failing:
            raise PyMongoError("insert refused")
        self.documents.append(document)
        return SimpleNamespace(inserted_id=document.get("_id"))


def test_to_string_list():
    assert to_string_list(["Reef Break", "Point Break"]) == ["Reef Break", "Point Break"]
    assert to_string_list([]) == []


def test_to_string_list_rejects_non_strings():
    with pytest.raises(ValueError):
        to_string_list(["Reef Break", 3])


def test_photo_url_takes_first():
    photos = [{"url": "https://example.com/a.jpg"}, {"url": "https://example.com/b.jpg"}]
    assert photo_url(photos) == "https://example.com/a.jpg"


def test_photo_url_empty():
    assert photo_url([]) == ""


def test_photo_url_rejects_photo_without_url():
    with pytest.raises(ValueError):
        photo_url([{"name": "a.jpg"}])


def test_record_to_spot_maps_fields():
    record = _record()
    fields = record["fields"]
    spot = record_to_spot(record, True)
    assert spot.id == ObjectId(record["id"])
    assert spot.destination == fields["Destination"]
    assert spot.address == fields["Address"]
    assert spot.country == fields["Destination State/Country"]
    assert spot.difficulty == 4
    assert spot.surf_break == fields["Surf Break"]
    assert spot.season_start == fields["Peak Surf Season Begins"]
    assert spot.season_end == fields["Peak Surf Season Ends"]
    assert spot.photo == fields["Photos"][0]["url"]
    assert spot.link == fields["Magic Seaweed Link"]
    assert spot.geocode == fields["Geocode"]
    assert spot.saved is True


def test_record_to_spot_rejects_invalid_id():
    with pytest.raises(ValueError):
        record_to_spot(_record(identifier="recAAAA"))


def test_record_to_spot_rejects_missing_field():
    record = _record()
    del record["fields"]["Geocode"]
    with pytest.raises(ValueError):
        record_to_spot(record)


def test_import_drops_then_inserts():
    collection = FakeCollection(existing=[{"destination": "Old"}])
    records = [_record("Pipeline"), _record("Hossegor")]
    assert import_records(collection, {"records": records}) == 2
    assert collection.calls[0] == "drop"
    assert [doc["destination"] for doc in collection.documents] == ["Pipeline", "Hossegor"]
    assert [doc["_id"] for doc in collection.documents] == [
        ObjectId(record["id"]) for record in records
    ]


def test_import_skips_invalid_ids(capsys):
    collection = FakeCollection()
    records = [_record("Pipeline", identifier="recAAAA"), _record("Hossegor")]
    assert import_records(collection, {"records": records}) == 1
    assert [doc["destination"] for doc in collection.documents] == ["Hossegor"]
    assert "recAAAA" in capsys.readouterr().out


def test_import_skips_failed_inserts():
    collection = FakeCollection(failing={"Pipeline"})
    records = [_record("Pipeline"), _record("Hossegor")]
    assert import_records(collection, {"records": records}) == 1
    assert [doc["destination"] for doc in collection.documents] == ["Hossegor"]


def test_import_keeps_saved_state_of_existing_spot():
    collection = FakeCollection(
        existing=[{"destination": "Pipeline", "saved": True}], clear_on_drop=False
    )
    import_records(collection, {"records": [_record("Pipeline")]})
    assert collection.documents[-1]["saved"] is True


def test_import_rejects_malformed_export():
    with pytest.raises(ValueError):
        import_records(FakeCollection(), {"records": "none"})


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("MONGODB_URI", "MONGODB_DB_NAME"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def _env_file(tmp_path):
    path = tmp_path / "settings.env"
    path.write_text(
        "MONGODB_URI=mongodb://localhost:27017\nMONGODB_DB_NAME=goodWave\n", encoding="utf-8"
    )
    return path


def test_main_fails_without_env_file(tmp_path, clean_env):
    assert main(["--env-file", str(tmp_path / "absent.env")]) == 1


def test_main_fails_without_uri(tmp_path, clean_env):
    env_file = tmp_path / "settings.env"
    env_file.write_text("MONGODB_DB_NAME=goodWave\n", encoding="utf-8")
    assert main(["--env-file", str(env_file)]) == 1


def test_main_imports_records(tmp_path, clean_env, capsys):
    source = tmp_path / "converted.json"
    source.write_text(
        json.dumps({"records": [_record("Pipeline"), _record("Hossegor")], "offset": ""}),
        encoding="utf-8",
    )
    with patch("pymongo.MongoClient") as client_class:
        collection = client_class.return_value.get_database.return_value.__getitem__.return_value
        collection.find_one.return_value = None
        code = main(["--env-file", str(_env_file(tmp_path)), "--input", str(source)])
    assert code == 0
    assert collection.drop.call_count == 1
    assert collection.insert_one.call_count == 2
    assert "Import des données terminé avec succès" in capsys.readouterr().out


def test_main_fails_on_missing_input(tmp_path, clean_env):
    with patch("pymongo.MongoClient"):
        code = main(
            ["--env-file", str(_env_file(tmp_path)), "--input", str(tmp_path / "none.json")]
        )
    assert code == 1