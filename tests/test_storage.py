"""Tests for dataset storage on local disk and S3."""

import io

import pytest
from botocore.exceptions import ClientError

from account_explorer import storage
from account_explorer.config import Settings
from account_explorer.records import DatasetLoadError


def _settings(data_dir, bucket=None):
    return Settings(dataset="bankhistory.csv", data_dir=str(data_dir), log_level="INFO", s3_bucket=bucket)


class FakeS3:
    """Minimal stand-in for the boto3 S3 client."""

    def __init__(self, objects=None):
        self.objects = dict(objects or {})

    def get_object(self, Bucket, Key):
        if Key not in self.objects:
            raise ClientError({"Error": {"Code": "NoSuchKey", "Message": "missing"}}, "GetObject")
        return {"Body": io.BytesIO(self.objects[Key])}

    def put_object(self, Bucket, Key, Body):
        self.objects[Key] = Body

    def list_objects_v2(self, Bucket, Prefix):
        keys = [k for k in self.objects if k.startswith(Prefix)]
        return {"Contents": [{"Key": k} for k in keys]} if keys else {}


class TestLocalStorage:
    """Local-disk storage when no bucket is configured."""

    def test_load_file(self, tmp_path, statement_csv):
        (tmp_path / "bankhistory.csv").write_text(statement_csv)
        records = storage.load_file("bankhistory.csv", settings=_settings(tmp_path))
        assert len(records) == 7

    def test_missing_dataset_is_fatal(self, tmp_path):
        with pytest.raises(DatasetLoadError, match="not found"):
            storage.load_file("bankhistory.csv", settings=_settings(tmp_path))

    def test_malformed_dataset_is_fatal(self, tmp_path):
        (tmp_path / "bad.csv").write_text("only,two\n1,2\n")
        with pytest.raises(DatasetLoadError):
            storage.load_file("bad.csv", settings=_settings(tmp_path))

    def test_save_file(self, tmp_path):
        where = storage.save_file("chart.html", "<html></html>", folder=str(tmp_path / "exports"),
                                  settings=_settings(tmp_path))
        assert (tmp_path / "exports" / "chart.html").read_text() == "<html></html>"
        assert where.endswith("chart.html")

    def test_list_files(self, tmp_path):
        for name in ["b.csv", "a.CSV", "notes.txt"]:
            (tmp_path / name).write_text("x")
        assert storage.list_files(settings=_settings(tmp_path)) == ["a.CSV", "b.csv"]

    def test_list_missing_folder(self, tmp_path):
        assert storage.list_files(settings=_settings(tmp_path / "absent")) == []


class TestS3Storage:
    """S3 storage when S3_BUCKET is set, with a stubbed client."""

    @pytest.fixture
    def fake_s3(self, monkeypatch):
        client = FakeS3()
        monkeypatch.setattr(storage, "get_s3_client", lambda settings: client)
        return client

    def test_load_file(self, fake_s3, statement_csv):
        fake_s3.objects["bank_data/bankhistory.csv"] = statement_csv.encode("utf-8")
        records = storage.load_file("bankhistory.csv", settings=_settings("bank_data", bucket="b"))
        assert records["description"].iloc[0] == "ITUNES STORE 123"

    def test_missing_object_is_fatal(self, fake_s3):
        with pytest.raises(DatasetLoadError, match="S3 download"):
            storage.load_file("bankhistory.csv", settings=_settings("bank_data", bucket="b"))

    def test_save_and_list(self, fake_s3):
        settings = _settings("bank_data", bucket="b")
        assert storage.save_file("march.csv", b"data", settings=settings) == "s3://b/bank_data/march.csv"
        assert fake_s3.objects["bank_data/march.csv"] == b"data"
        assert storage.list_files(settings=settings) == ["march.csv"]
