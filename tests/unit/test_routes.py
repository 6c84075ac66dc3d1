import inspect
import pytest
from fastapi.testclient import TestClient
from blurguard.api import routes
from blurguard.api.routes import get_processor
from blurguard.core.exceptions import VisionServiceError
from blurguard.main import app
from blurguard.services.backup_guardian import BackupGuardian
from blurguard.services.job_processor import JobProcessor

REPLY = '[{"type": "email", "box_2d": [0, 0, 500, 500], "value": "a@b.com"}, {"type": "id", "box_2d": [500, 500, 1000, 1000]}]'

class StubVisionClient:
    def __init__(self, reply=REPLY, error=None):
        self.reply = reply
        self.error = error

    def generate_text(self, image_bytes, mime_type, prompt):
        if self.error:
            raise self.error
        return self.reply

@pytest.fixture
def client_for():
    def build(vision_client):
        processor = JobProcessor(vision_client=vision_client, backups=BackupGuardian(suffix="_backup"))
        app.dependency_overrides[get_processor] = lambda: processor
        return TestClient(app)
    yield build
    app.dependency_overrides.clear()

def test_health(client_for):
    response = client_for(StubVisionClient()).get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}

def test_detect(client_for, noise_png):
    response = client_for(StubVisionClient()).post("/api/v1/detect", json={"image_path": str(noise_png)})

    assert response.status_code == 200
    body = response.json()
    assert body["width"] == 200 and body["height"] == 100
    assert body["message"] == "Found 2 sensitive region(s)"
    assert body["detections"][0]["label"] == "email: a@b.com"
    assert body["preview_boxes"][1]["left"] == "50%"

def test_detect_nothing_found(client_for, noise_png):
    response = client_for(StubVisionClient(reply="no JSON here")).post(
        "/api/v1/detect", json={"image_path": str(noise_png)}
    )
    assert response.status_code == 200
    assert response.json()["message"] == "No sensitive data found"
    assert response.json()["detections"] == []

def test_detect_ai_failure(client_for, noise_png):
    client = client_for(StubVisionClient(error=VisionServiceError("quota exceeded")))
    response = client.post("/api/v1/detect", json={"image_path": str(noise_png)})
    assert response.status_code == 502
    assert "quota exceeded" in response.json()["detail"]

def test_detect_unsupported_type(client_for, tmp_path):
    notes = tmp_path / "notes.txt"
    notes.write_text("hello")
    response = client_for(StubVisionClient()).post("/api/v1/detect", json={"image_path": str(notes)})
    assert response.status_code == 415

def test_redact_selected_indices(client_for, noise_png):
    detections = [
        {"type": "email", "box_2d": [0, 0, 500, 500]},
        {"type": "id", "box_2d": [500, 500, 1000, 1000]},
        {"type": "broken", "box_2d": [1, 2]},
    ]
    response = client_for(StubVisionClient()).post("/api/v1/redact", json={
        "image_path": str(noise_png),
        "detections": detections,
        "indices": [1, 2, 7],
    })

    assert response.status_code == 200
    body = response.json()
    assert body["regions_redacted"] == 1
    assert body["backup_path"] == str(noise_png.with_name("photo_backup.png"))

def test_redact_missing_image(client_for, tmp_path):
    response = client_for(StubVisionClient()).post("/api/v1/redact", json={
        "image_path": str(tmp_path / "gone.png"),
        "detections": [{"box_2d": [0, 0, 10, 10]}],
    })
    assert response.status_code == 500

def test_auto_blur_and_restore(client_for, noise_png):
    before = noise_png.read_bytes()
    client = client_for(StubVisionClient())

    response = client.post("/api/v1/auto-blur", json={"image_path": str(noise_png)})
    assert response.status_code == 200
    assert response.json()["regions_redacted"] == 2

    response = client.post("/api/v1/restore", json={"backup_path": response.json()["backup_path"]})
    assert response.status_code == 200
    assert response.json()["restored_path"] == str(noise_png)
    assert noise_png.read_bytes() == before

def test_restore_invalid_reference(client_for, noise_png):
    before = noise_png.read_bytes()
    response = client_for(StubVisionClient()).post("/api/v1/restore", json={"backup_path": str(noise_png)})
    assert response.status_code == 400
    assert noise_png.read_bytes() == before

def test_handlers_run_in_the_threadpool():
    # blocking AI calls and file I/O must not run on the event loop
    for handler in (routes.detect_sensitive_data, routes.redact_regions, routes.auto_blur, routes.restore_backup):
        assert not inspect.iscoroutinefunction(handler)

def test_detections_round_trip_into_redact(client_for, noise_png):
    client = client_for(StubVisionClient())
    detected = client.post("/api/v1/detect", json={"image_path": str(noise_png)}).json()["detections"]

    assert detected[0]["kind"] == "email"
    assert detected[0]["box_2d"] == [0, 0, 500, 500]
    assert all(isinstance(n, int) for n in detected[0]["box_2d"])

    response = client.post("/api/v1/redact", json={
        "image_path": str(noise_png),
        "detections": detected,
        "indices": [0],
    })
    assert response.status_code == 200
    assert response.json()["regions_redacted"] == 1

def test_oversized_coordinate_is_ignored(client_for, noise_png):
    reply = '[{"type": "email", "box_2d": [0, 0, 500, 500]}, {"type": "id", "box_2d": [1' + "0" * 400 + ', 0, 500, 500]}]'
    response = client_for(StubVisionClient(reply=reply)).post("/api/v1/detect", json={"image_path": str(noise_png)})
    assert response.status_code == 200
    assert len(response.json()["detections"]) == 1
