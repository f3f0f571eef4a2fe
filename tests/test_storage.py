from unittest.mock import MagicMock, patch

import pytest

from dailyreport.storage import DriveStorage, public_view_url


@pytest.fixture
def service():
    return MagicMock()


def test_find_file_escapes_name(service):
    files_api = service.files.return_value
    files_api.list.return_value.execute.return_value = {"files": [
        {"id": "f1", "name": "Kid's Plan", "mimeType": "application/vnd.google-apps.document",
         "webViewLink": "https://docs/f1"},
    ]}
    found = DriveStorage(service).find_file("folder-1", "Kid's Plan")

    assert found[0].id == "f1"
    assert found[0].url == "https://docs/f1"
    q = files_api.list.call_args.kwargs["q"]
    assert q == "name = 'Kid\\'s Plan' and 'folder-1' in parents and trashed = false"


def test_get_folder_rejects_files(service):
    service.files.return_value.get.return_value.execute.return_value = {
        "id": "x", "mimeType": "application/pdf",
    }
    with pytest.raises(FileNotFoundError):
        DriveStorage(service).get_folder("x")


@patch("dailyreport.storage.requests.get")
def test_thumbnail_fetches_larger_image(mock_get, service):
    service.files.return_value.get.return_value.execute.return_value = {
        "thumbnailLink": "https://lh3.googleusercontent.com/abc=s220",
    }
    resp = MagicMock()
    resp.content = b"img"
    resp.headers = {"Content-Type": "image/jpeg; charset=binary"}
    mock_get.return_value = resp
    creds = MagicMock(token="tok")

    data, mime = DriveStorage(service, creds).thumbnail("f1")

    assert (data, mime) == (b"img", "image/jpeg")
    args, kwargs = mock_get.call_args
    assert args[0] == "https://lh3.googleusercontent.com/abc=s1600"
    assert kwargs["headers"] == {"Authorization": "Bearer tok"}
    resp.raise_for_status.assert_called_once()


def test_thumbnail_missing_raises(service):
    service.files.return_value.get.return_value.execute.return_value = {}
    with pytest.raises(FileNotFoundError):
        DriveStorage(service).thumbnail("f1")


def test_upload_temporary_image_shares_by_link(service):
    files_api = service.files.return_value
    files_api.create.return_value.execute.return_value = {"id": "tmp-1", "name": "menu.png"}

    stored = DriveStorage(service).upload_temporary_image(b"img", "menu.png")

    assert stored.url == public_view_url("tmp-1")
    service.permissions.return_value.create.assert_called_once_with(
        fileId="tmp-1", body={"type": "anyone", "role": "reader"}
    )
    DriveStorage(service).delete("tmp-1")
    files_api.delete.assert_called_once_with(fileId="tmp-1")
