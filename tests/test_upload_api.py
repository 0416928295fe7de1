import unittest
from unittest import mock

from fastapi import HTTPException

from app.core.config import get_settings
from app.core.storage_utils import get_storage
from app.main import app
from app.routers import upload as upload_router
from app.services.upload_service import UploadService
from tests.support import ApiTestCase, InMemoryStorage


class FailingStorage:
    def upload(self, key, file_bytes, content_type):
        raise RuntimeError("bucket unavailable")

    def check_bucket(self):
        return False


class UploadApiTests(ApiTestCase):
    def test_upload_image(self):
        response = self.client.post(
            "/api/upload",
            files={"file": ("flyer.PNG", b"\x89PNG fake bytes", "image/png")},
        )
        self.assertEqual(response.status_code, 200, response.text)
        payload = response.json()
        self.assertTrue(payload["key"].endswith(".png"))
        self.assertEqual(payload["url"], f"https://media.example.test/{payload['key']}")
        self.assertEqual(payload["filename"], "flyer.PNG")
        self.assertEqual(payload["mime_type"], "image/png")
        self.assertEqual(payload["size"], len(b"\x89PNG fake bytes"))
        self.assertIn(payload["key"], self.storage.objects)

    def test_upload_video(self):
        response = self.client.post(
            "/api/upload",
            files={"file": ("teaser.mp4", b"....", "video/mp4")},
        )
        self.assertEqual(response.status_code, 200, response.text)

    def test_rejects_non_media(self):
        response = self.client.post(
            "/api/upload",
            files={"file": ("notes.txt", b"hello", "text/plain")},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.storage.objects, {})

    def test_missing_file(self):
        response = self.client.post("/api/upload", data={"other": "x"})
        self.assertEqual(response.status_code, 400)

    def test_storage_failure_is_upstream_error(self):
        app.dependency_overrides[get_storage] = lambda: FailingStorage()
        response = self.client.post(
            "/api/upload",
            files={"file": ("flyer.jpg", b"jpeg", "image/jpeg")},
        )
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["detail"], "Failed to upload file")

    def test_oversize_upload_is_413(self):
        small = get_settings().model_copy(update={"MAX_UPLOAD_BYTES": 10})
        with mock.patch.object(upload_router, "settings", small):
            too_big = self.client.post(
                "/api/upload",
                files={"file": ("flyer.jpg", b"x" * 11, "image/jpeg")},
            )
            exact = self.client.post(
                "/api/upload",
                files={"file": ("flyer.jpg", b"x" * 10, "image/jpeg")},
            )
        self.assertEqual(too_big.status_code, 413)
        self.assertEqual(exact.status_code, 200, exact.text)
        self.assertEqual(list(self.storage.objects), [exact.json()["key"]])


class UploadLimitTests(unittest.TestCase):
    def setUp(self):
        self.storage = InMemoryStorage()
        self.service = UploadService(self.storage, max_bytes=10)

    def test_one_byte_over_limit_is_rejected(self):
        with self.assertRaises(HTTPException) as ctx:
            self.service.upload("flyer.jpg", "image/jpeg", b"x" * 11)
        self.assertEqual(ctx.exception.status_code, 413)
        self.assertEqual(self.storage.objects, {})

    def test_exactly_at_limit_is_stored(self):
        result = self.service.upload("flyer.jpg", "image/jpeg", b"x" * 10)
        self.assertEqual(result.size, 10)
        self.assertEqual(self.storage.objects[result.key], ("image/jpeg", b"x" * 10))


if __name__ == "__main__":
    unittest.main()
