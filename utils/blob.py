import os
import tempfile
from pathlib import Path

from azure.core.exceptions import ServiceRequestError, ServiceResponseError
from azure.storage.blob import BlobClient, BlobServiceClient
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from config import get_blob_storage_params
from models.errors import MissingSourceFile


def get_blob_service_client() -> BlobServiceClient:
    params = get_blob_storage_params()
    return BlobServiceClient.from_connection_string(params["connection_string"])


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=30),
    retry=retry_if_exception_type((ServiceRequestError, ServiceResponseError)),
    reraise=True,
)
def _download_to_file(blob_client: BlobClient, path: Path) -> None:
    with open(path, "wb") as handle:
        blob_client.download_blob().readinto(handle)


def download_blob(
    container_name: str,
    file_name: str,
    service_client: BlobServiceClient = None,
) -> Path:
    """
    Download container_name/file_name to a new unique temp file and return its path.

    The caller owns the returned file and must delete it. Raises
    MissingSourceFile, without creating a local file, when the blob is absent.
    """
    service_client = service_client or get_blob_service_client()
    blob_client = service_client.get_blob_client(container=container_name, blob=file_name)

    if not blob_client.exists():
        raise MissingSourceFile(file_name, container_name)

    stem, suffix = os.path.splitext(file_name)
    fd, temp_name = tempfile.mkstemp(prefix=f"{stem}-", suffix=suffix or ".csv")
    os.close(fd)
    temp_path = Path(temp_name)
    try:
        _download_to_file(blob_client, temp_path)
    except Exception:
        temp_path.unlink(missing_ok=True)
        raise
    return temp_path
