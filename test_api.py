"""HTTP tests for the Renderri API, run in-process with TestClient."""
from datetime import timedelta

import pytest
import requests

from auth.services import create_access_token
from common.errors import GenerationEmptyError, GenerationServiceError
from config import Config
from utils.data_uri import to_data_uri
from conftest import oversized_png_bytes, png_bytes, png_data_uri


def test_health(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "image_service": True}


def test_me(client, auth_headers):
    response = client.get("/api/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"id": "user-1", "email": "ada@example.com"}


def test_generate_requires_token(client):
    response = client.post("/api/generate", json={"prompt": "a cat"})
    assert response.status_code in (401, 403)


def test_generate_rejects_invalid_token(client):
    response = client.post(
        "/api/generate",
        json={"prompt": "a cat"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == 401


def test_generate_rejects_expired_token(client):
    token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-10))
    response = client.post(
        "/api/generate",
        json={"prompt": "a cat"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 401


def test_generate(client, auth_headers, generator):
    response = client.post(
        "/api/generate",
        json={"prompt": "a red balloon", "negative_prompt": "blurry", "quality": "hd", "num_variations": 2},
        headers=auth_headers,
    )

    assert response.status_code == 200
    urls = response.json()["image_urls"]
    assert len(urls) == 2
    assert all(u.startswith("/assets/storage/generated-files/ada@example.com/") for u in urls)
    assert generator.payloads[0] == ["a red balloon, 4k, HD, high resolution, avoid blurry"]

    # Published files are served by the static mount
    served = client.get(urls[0])
    assert served.status_code == 200
    assert served.content == png_bytes()


def test_owner_falls_back_to_id_without_email(client, generator):
    token = create_access_token({"sub": "user-9"})
    response = client.post(
        "/api/generate",
        json={"prompt": "a cat"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 200
    assert response.json()["image_urls"][0].startswith("/assets/storage/generated-files/user-9/")


@pytest.mark.parametrize("body", [
    {"prompt": "a cat", "num_variations": 5},
    {"prompt": "a cat", "num_variations": 0},
    {"prompt": ""},
    {"prompt": "a cat", "quality": "ultra"},
])
def test_generate_validation(client, auth_headers, body):
    response = client.post("/api/generate", json=body, headers=auth_headers)
    assert response.status_code == 422


def test_generate_blank_prompt(client, auth_headers):
    response = client.post("/api/generate", json={"prompt": "   "}, headers=auth_headers)
    assert response.status_code == 400


def test_generate_empty_result_is_502(client, auth_headers, generator):
    generator.results = [GenerationEmptyError("No image was generated in a variation.")]
    response = client.post("/api/generate", json={"prompt": "a cat"}, headers=auth_headers)
    assert response.status_code == 502


def test_generate_service_failure_is_502(client, auth_headers, generator):
    generator.results = [GenerationServiceError("upstream down")]
    response = client.post("/api/generate", json={"prompt": "a cat"}, headers=auth_headers)
    assert response.status_code == 502


def test_generate_bad_reference_is_400(client, auth_headers, generator):
    response = client.post(
        "/api/generate",
        json={"prompt": "a cat", "reference_image": "data:image/png;base64,"},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert generator.payloads == []


def test_magic_edit(client, auth_headers, generator):
    response = client.post(
        "/api/magic-edit",
        json={
            "prompt": "add a hat",
            "image_data_uri": png_data_uri(),
            "mask_data_uri": png_data_uri((255, 255, 255), mode="RGB"),
        },
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["image_url"].startswith("/assets/storage/generated-files/ada@example.com/")
    assert generator.payloads[0][0] == "add a hat"


def test_magic_edit_empty_mask_is_400(client, auth_headers, generator):
    response = client.post(
        "/api/magic-edit",
        json={
            "prompt": "add a hat",
            "image_data_uri": png_data_uri(),
            "mask_data_uri": png_data_uri((0, 0, 0), mode="RGB"),
        },
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert generator.payloads == []


def test_magic_edit_strokes_need_dimensions(client, auth_headers):
    response = client.post(
        "/api/magic-edit",
        json={
            "prompt": "add a hat",
            "image_data_uri": png_data_uri(),
            "strokes": [{"points": [[1, 1], [4, 4]], "brush_radius": 2}],
        },
        headers=auth_headers,
    )
    assert response.status_code == 422


def test_magic_edit_with_strokes(client, auth_headers, generator):
    response = client.post(
        "/api/magic-edit",
        json={
            "prompt": "add a hat",
            "image_data_uri": png_data_uri(),
            "strokes": [{"points": [[1, 1], [4, 4]], "brush_radius": 2}],
            "width": 8,
            "height": 8,
        },
        headers=auth_headers,
    )
    assert response.status_code == 200


def test_remove_background(client, auth_headers, generator):
    generator.results = [None]
    response = client.post(
        "/api/remove-background",
        json={"image_data_uri": png_data_uri()},
        headers=auth_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["mask_data_uri"].startswith("data:image/png;base64,")
    assert body["cutout_data_uri"] is None


def test_remove_background_with_cutout(client, auth_headers, generator):
    from common.models import InlineImage
    white = InlineImage.from_bytes(png_bytes((255, 255, 255), mode="RGB"), "image/png")
    generator.results = [white]

    response = client.post(
        "/api/remove-background",
        json={"image_data_uri": png_data_uri((9, 9, 9, 255)), "composite": True},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["cutout_data_uri"].startswith("data:image/png;base64,")


def test_apply_mask(client, auth_headers):
    response = client.post(
        "/api/apply-mask",
        json={"image_data_uri": png_data_uri(), "mask_data_uri": png_data_uri((0, 0, 0), mode="RGB")},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["image_data_uri"].startswith("data:image/png;base64,")


def test_apply_mask_bad_image_is_400(client, auth_headers):
    response = client.post(
        "/api/apply-mask",
        json={"image_data_uri": "data:image/png;base64,aGVsbG8=", "mask_data_uri": png_data_uri()},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_upload_and_library(client, auth_headers):
    upload = client.post(
        "/api/uploads",
        files={"file": ("ref.png", png_bytes(), "image/png")},
        headers=auth_headers,
    )
    assert upload.status_code == 200
    url = upload.json()["url"]
    assert url.startswith("/assets/storage/chat-attachments/ada@example.com/")
    assert client.get(url).content == png_bytes()

    generated = client.post("/api/generate", json={"prompt": "a cat"}, headers=auth_headers)
    assert generated.status_code == 200

    library = client.get("/api/library", headers=auth_headers)
    assert library.status_code == 200
    assert library.json() == {
        "generated": generated.json()["image_urls"],
        "uploaded": [url],
    }


def test_library_empty_for_new_user(client):
    token = create_access_token({"sub": "fresh", "email": "new@example.com"})
    response = client.get("/api/library", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json() == {"generated": [], "uploaded": []}


def test_upload_rejects_non_image(client, auth_headers):
    response = client.post(
        "/api/uploads",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_upload_rejects_large_file(client, auth_headers, monkeypatch):
    monkeypatch.setattr(Config, "MAX_UPLOAD_BYTES", 10)
    response = client.post(
        "/api/uploads",
        files={"file": ("ref.png", png_bytes(), "image/png")},
        headers=auth_headers,
    )
    assert response.status_code == 413


def test_apply_mask_oversized_image_is_400(client, auth_headers):
    bomb = to_data_uri(oversized_png_bytes(), "image/png")
    response = client.post(
        "/api/apply-mask",
        json={"image_data_uri": png_data_uri(), "mask_data_uri": bomb},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_magic_edit_rejects_huge_stroke_canvas(client, auth_headers, generator):
    response = client.post(
        "/api/magic-edit",
        json={
            "prompt": "add a hat",
            "image_data_uri": png_data_uri(),
            "strokes": [{"points": [[1, 1]]}],
            "width": 200000,
            "height": 200000,
        },
        headers=auth_headers,
    )
    assert response.status_code == 422
    assert generator.payloads == []


def test_generate_unreachable_reference_is_400(client, auth_headers, generator, fake_http):
    fake_http.error = requests.ConnectionError("connection refused")
    response = client.post(
        "/api/generate",
        json={"prompt": "a cat", "reference_image": "https://cdn.example.com/ref.png", "num_variations": 2},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert generator.payloads == []


def test_remove_background_cutout_fetches_url_once(client, auth_headers, generator, fake_http):
    response = client.post(
        "/api/remove-background",
        json={"image_data_uri": "https://cdn.example.com/photo.png", "composite": True},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["cutout_data_uri"].startswith("data:image/png;base64,")
    assert len(fake_http.calls) == 1
