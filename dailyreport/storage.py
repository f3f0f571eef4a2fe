# dailyreport/storage.py
import io
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

import requests
from googleapiclient.http import MediaIoBaseUpload

from .logger import logger

FOLDER_MIME = "application/vnd.google-apps.folder"
PDF_MIME = "application/pdf"
FILE_FIELDS = "id, name, mimeType, webViewLink"

THUMBNAIL_SIZE = 1600  # px, long edge


@dataclass
class StoredFile:
    id: str
    name: str = ""
    mime_type: str = ""
    url: str = ""


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


def _stored(meta: dict) -> StoredFile:
    return StoredFile(
        id=meta.get("id", ""),
        name=meta.get("name", ""),
        mime_type=meta.get("mimeType", ""),
        url=meta.get("webViewLink", "") or "",
    )


def public_view_url(file_id: str) -> str:
    return f"https://drive.google.com/uc?export=view&id={file_id}"


class DriveStorage:
    def __init__(self, service, creds=None, timeout: int = 20):
        self.service = service
        self.creds = creds
        self.timeout = timeout

    def get_folder(self, folder_id: str) -> StoredFile:
        meta = self.service.files().get(
            fileId=folder_id, fields=FILE_FIELDS, supportsAllDrives=True
        ).execute()
        if meta.get("mimeType") != FOLDER_MIME:
            raise FileNotFoundError(f"Drive item {folder_id} is not a folder")
        return _stored(meta)

    def _list(self, q: str) -> List[StoredFile]:
        logger.debug(f"[DRIVE] files.list q={q}")
        resp = self.service.files().list(
            q=q,
            spaces="drive",
            fields=f"files({FILE_FIELDS})",
            supportsAllDrives=True,
            includeItemsFromAllDrives=True,
        ).execute()
        return [_stored(f) for f in resp.get("files", [])]

    def find_file(self, folder_id: str, name: str) -> List[StoredFile]:
        q = f"name = '{_escape(name)}' and '{folder_id}' in parents and trashed = false"
        return self._list(q)

    def find_files_by_title(self, title: str, mime_type: str) -> List[StoredFile]:
        q = f"name contains '{_escape(title)}' and mimeType = '{mime_type}' and trashed = false"
        return self._list(q)

    def download(self, file_id: str) -> bytes:
        return self.service.files().get_media(fileId=file_id).execute()

    def thumbnail(self, file_id: str) -> Tuple[bytes, str]:
        """
        First-page image of a file (Drive renders one for PDFs).
        Raises when Drive has no thumbnail or the fetch fails.
        """
        meta = self.service.files().get(
            fileId=file_id, fields="thumbnailLink", supportsAllDrives=True
        ).execute()
        link: Optional[str] = meta.get("thumbnailLink")
        if not link:
            raise FileNotFoundError(f"No thumbnail available for {file_id}")

        # thumbnailLink ends in "=s220"; ask for a readable size instead
        link = re.sub(r"=s\d+$", f"=s{THUMBNAIL_SIZE}", link)
        headers = {}
        if self.creds is not None and getattr(self.creds, "token", None):
            headers["Authorization"] = f"Bearer {self.creds.token}"
        r = requests.get(link, headers=headers, timeout=self.timeout)
        r.raise_for_status()
        mime = (r.headers.get("Content-Type") or "image/png").split(";")[0].strip()
        return r.content, mime

    def upload_temporary_image(self, data: bytes, name: str, mime_type: str = "image/png") -> StoredFile:
        """Upload an image and share it anyone-with-link so it can be embedded by URL."""
        media = MediaIoBaseUpload(io.BytesIO(data), mimetype=mime_type, resumable=False)
        created = self.service.files().create(
            body={"name": name, "mimeType": mime_type},
            media_body=media,
            fields=FILE_FIELDS,
        ).execute()
        file_id = created["id"]
        self.service.permissions().create(
            fileId=file_id, body={"type": "anyone", "role": "reader"}
        ).execute()
        logger.debug(f"[DRIVE] Uploaded temporary image {name} ({file_id})")
        stored = _stored(created)
        stored.url = public_view_url(file_id)
        return stored

    def delete(self, file_id: str) -> None:
        self.service.files().delete(fileId=file_id).execute()
        logger.debug(f"[DRIVE] Deleted {file_id}")
