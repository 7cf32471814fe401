from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Optional

import boto3
import pandas as pd
from botocore.exceptions import BotoCoreError, ClientError

from account_explorer.config import Settings, get_settings
from account_explorer.logging_setup import get_logger
from account_explorer.records import DatasetLoadError, read_records

logger = get_logger(__name__)


def get_s3_client(settings: Settings):
    return boto3.client("s3", region_name=settings.aws_region)


def _folder(settings: Settings, folder: Optional[str]) -> str:
    return folder or settings.data_dir


def load_file(
    file_name: str,
    folder: Optional[str] = None,
    dayfirst: bool = False,
    settings: Optional[Settings] = None,
) -> pd.DataFrame:
    """
    Loads the transaction CSV from either local disk or S3.

    Any failure raises ``DatasetLoadError``; nothing can be drawn without
    the dataset.
    """
    settings = settings or get_settings()
    folder = _folder(settings, folder)

    if settings.s3_bucket:
        s3 = get_s3_client(settings)
        key = f"{folder}/{file_name}"
        try:
            obj = s3.get_object(Bucket=settings.s3_bucket, Key=key)
            body = obj["Body"].read()
        except (BotoCoreError, ClientError) as exc:
            raise DatasetLoadError(f"S3 download of s3://{settings.s3_bucket}/{key} failed: {exc}") from exc
        logger.info("Read %d bytes from s3://%s/%s", len(body), settings.s3_bucket, key)
        return read_records(BytesIO(body), dayfirst=dayfirst)

    local_path = Path(folder) / file_name
    if not local_path.exists():
        raise DatasetLoadError(f"Dataset not found: {local_path}")
    return read_records(local_path, dayfirst=dayfirst)


def save_file(
    file_name: str,
    data: bytes | str,
    folder: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> str:
    """
    Saves a file (e.g. an exported chart) to either local disk or S3 and
    returns where it went.
    """
    settings = settings or get_settings()
    folder = _folder(settings, folder)
    body = data.encode("utf-8") if isinstance(data, str) else data

    if settings.s3_bucket:
        s3 = get_s3_client(settings)
        key = f"{folder}/{file_name}"
        s3.put_object(Bucket=settings.s3_bucket, Key=key, Body=body)
        return f"s3://{settings.s3_bucket}/{key}"

    local_path = Path(folder) / file_name
    local_path.parent.mkdir(parents=True, exist_ok=True)
    local_path.write_bytes(body)
    return str(local_path)


def list_files(folder: Optional[str] = None, settings: Optional[Settings] = None) -> list[str]:
    """
    Lists CSV datasets in a folder (Local or S3).
    """
    settings = settings or get_settings()
    folder = _folder(settings, folder)

    if settings.s3_bucket:
        s3 = get_s3_client(settings)
        try:
            response = s3.list_objects_v2(Bucket=settings.s3_bucket, Prefix=f"{folder}/")
        except (BotoCoreError, ClientError) as exc:
            logger.warning("Listing s3://%s/%s failed: %s", settings.s3_bucket, folder, exc)
            return []
        names = [obj["Key"].split("/")[-1] for obj in response.get("Contents", [])]
    else:
        local_path = Path(folder)
        names = [f.name for f in local_path.glob("*") if f.is_file()] if local_path.exists() else []
    return sorted(name for name in names if name.lower().endswith(".csv"))
