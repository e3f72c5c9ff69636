from fastapi import status
from fastapi.testclient import TestClient

from tests.consts import TEST_BASE_URL, TEST_BUCKET_NAME

TEST_FILE_CONTENT = b"Hello, world!"
TEST_FILE_CONTENT_TYPE = "text/plain"
TEST_PDF_CONTENT = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<</Root 1 0 R>>\n%%EOF"


def upload(client: TestClient, filename: str, content: bytes = TEST_FILE_CONTENT, **form):
    return client.post(
        "/v1/uploads",
        files={"file": (filename, content, TEST_FILE_CONTENT_TYPE)},
        data=form,
    )


def test__upload_file__happy_path(client: TestClient, storage_root):
    response = upload(client, "hello.txt")

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json() == {
        "path": "files/hello.txt",
        "url": f"{TEST_BASE_URL}/files/hello.txt",
        "disk": "local",
    }
    assert (storage_root / "files" / "hello.txt").read_bytes() == TEST_FILE_CONTENT


def test__upload_file__existing_name_gets_unique_name(client: TestClient):
    first = upload(client, "hello.txt").json()
    second = upload(client, "hello.txt").json()

    assert first["path"] == "files/hello.txt"
    assert second["path"] != first["path"]
    assert second["path"].endswith(".txt")


def test__upload_file__with_directory_and_name(client: TestClient):
    response = upload(client, "scan.pdf", TEST_PDF_CONTENT, directory="invoices/2024", name="january.pdf")

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["path"] == "invoices/2024/january.pdf"


def test__upload_file__sequence_strategy(client: TestClient):
    paths = [upload(client, "photo.jpg", strategy="sequence").json()["path"] for _ in range(3)]

    assert paths == ["files/photo_1.jpg", "files/photo_2.jpg", "files/photo_3.jpg"]


def test__upload_file__md5_strategy_is_idempotent(client: TestClient):
    first = upload(client, "a.txt", strategy="md5").json()["path"]
    second = upload(client, "b.txt", strategy="md5").json()["path"]

    assert first == second


def test__upload_file__private_visibility(client: TestClient, storage_root):
    path = upload(client, "secret.txt", visibility="private").json()["path"]

    assert (storage_root / path).stat().st_mode & 0o777 == 0o600


def test__upload_file__to_s3(mocked_aws, client: TestClient):
    response = upload(client, "hello.txt", disk="s3")

    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["disk"] == "s3"
    obj = mocked_aws.get_object(Bucket=TEST_BUCKET_NAME, Key=body["path"])
    assert obj["Body"].read() == TEST_FILE_CONTENT


def test__upload_file__unknown_disk(client: TestClient):
    response = upload(client, "hello.txt", disk="ftp")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert "ftp" in response.json()["detail"]


def test__upload_file__invalid_strategy(client: TestClient):
    response = upload(client, "hello.txt", strategy="random")

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test__upload_file__storage_failure(client: TestClient, storage_root):
    (storage_root / "files").write_bytes(b"in the way")

    response = upload(client, "hello.txt")

    assert response.status_code == status.HTTP_502_BAD_GATEWAY


def test__get_url(client: TestClient):
    response = client.get("/v1/uploads/url", params={"path": "files/hello.txt"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "path": "files/hello.txt",
        "url": f"{TEST_BASE_URL}/files/hello.txt",
        "temporary": False,
    }


def test__get_url__absolute_url_passes_through(client: TestClient):
    response = client.get("/v1/uploads/url", params={"path": "https://already/hosted.png"})

    assert response.json()["url"] == "https://already/hosted.png"


def test__get_url__temporary_on_local_disk_falls_back(client: TestClient):
    response = client.get("/v1/uploads/url", params={"path": "files/hello.txt", "expires_in": 60})

    body = response.json()
    assert body["temporary"] is True
    assert body["url"] == f"{TEST_BASE_URL}/files/hello.txt"


def test__get_url__temporary_on_s3(mocked_aws, client: TestClient):
    response = client.get(
        "/v1/uploads/url",
        params={"path": "files/hello.txt", "disk": "s3", "expires_in": 60},
    )

    assert response.status_code == status.HTTP_200_OK
    assert "Expires" in response.json()["url"]


def test__delete_upload(client: TestClient, storage_root):
    path = upload(client, "hello.txt").json()["path"]

    response = client.delete(f"/v1/uploads/{path}")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"path": path, "deleted": True}
    assert not (storage_root / path).exists()


def test__delete_upload__missing_file_succeeds(client: TestClient):
    response = client.delete("/v1/uploads/files/never-uploaded.txt")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["deleted"] is True


def test__health(client: TestClient):
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok", "default_disk": "local", "disks": ["local", "s3"]}
