import base64
import json
from io import BytesIO
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from memegen.api.deps import get_engagement, get_feed
from memegen.api.main import create_app
from memegen.core.config import settings
from memegen.services.community.engagement import EngagementTracker
from memegen.services.community.feed import CommunityFeed
from memegen.services.community.stores import LocalStore
from tests.conftest import make_png


@pytest.fixture
def client(tmp_path):
    app = create_app(health_checks=False)
    feed = CommunityFeed(None, LocalStore(tmp_path / "memes.json"))
    tracker = EngagementTracker(tmp_path / "engagement.json")
    app.dependency_overrides[get_feed] = lambda: feed
    app.dependency_overrides[get_engagement] = lambda: tracker
    return TestClient(app)


@pytest.fixture
def template_image():
    with patch("memegen.services.compositor.meme_composer.requests.get") as mock_get:
        mock_get.return_value = MagicMock(content=make_png((700, 600)), raise_for_status=lambda: None)
        yield mock_get


def _image(resp) -> Image.Image:
    return Image.open(BytesIO(resp.content))


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}


def test_list_templates(client):
    data = client.get("/v1/templates").json()
    assert len(data) == 10
    assert data[0]["id"] == "drake"
    assert data[0]["top_text"] == {"x": 350, "y": 100, "max_width": 300}


def test_random_template(client):
    assert client.get("/v1/templates/random").json()["id"]


def test_render_template_png(client, template_image):
    resp = client.post("/v1/memes/template", json={"template_id": "drake", "top_text": "hello", "bottom_text": "world"})
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"
    assert _image(resp).size == (700, 600)


def test_render_template_data_uri(client, template_image):
    resp = client.post("/v1/memes/template", json={
        "template_id": "doge",
        "top_text": "such code",
        "style": {"shadow": True, "font_scale": 0.8},
        "positions": {"top": {"x_pct": 0.5, "y_pct": 0.3}},
        "format": "data_uri",
    })
    assert resp.status_code == 200
    assert resp.json()["data_uri"].startswith("data:image/png;base64,")


def test_render_unknown_template(client):
    resp = client.post("/v1/memes/template", json={"template_id": "nope", "top_text": "x"})
    assert resp.status_code == 404
    assert resp.json()["error"] == "TemplateNotFoundError"


def test_render_without_captions_returns_plain_template(client, template_image):
    resp = client.post("/v1/memes/template", json={"template_id": "drake"})
    assert resp.status_code == 200
    assert _image(resp).size == (700, 600)


def test_upload_without_captions(client):
    resp = client.post("/v1/memes/upload", files={"image": ("cat.png", make_png((400, 300)), "image/png")})
    assert resp.status_code == 200


def test_render_template_image_unreachable(client):
    with patch("memegen.services.compositor.meme_composer.requests.get", side_effect=OSError("offline")):
        resp = client.post("/v1/memes/template", json={"template_id": "drake", "top_text": "x"})
    assert resp.status_code == 422
    assert resp.json()["error"] == "ImageLoadError"


def test_render_upload(client):
    resp = client.post(
        "/v1/memes/upload",
        files={"image": ("cat.png", make_png((400, 300)), "image/png")},
        data={"top_text": "top", "bottom_text": "bottom", "style": json.dumps({"fill_color": "yellow"})},
    )
    assert resp.status_code == 200
    assert _image(resp).size == (400, 300)


def test_render_upload_not_an_image(client):
    resp = client.post("/v1/memes/upload", files={"image": ("x.png", b"nope", "image/png")}, data={"top_text": "a"})
    assert resp.status_code == 422


def test_render_upload_bad_style_json(client):
    resp = client.post(
        "/v1/memes/upload",
        files={"image": ("cat.png", make_png(), "image/png")},
        data={"top_text": "a", "style": json.dumps({"align": "diagonal"})},
    )
    assert resp.status_code == 422


def test_story_from_upload(client):
    resp = client.post("/v1/memes/story", files={"image": ("a.png", make_png((300, 300)), "image/png")},
                       data={"top_text": "story time"})
    assert resp.status_code == 200
    assert _image(resp).size == (1080, 1920)


def test_story_from_template(client, template_image):
    resp = client.post("/v1/memes/story", data={"template_id": "drake", "bottom_text": "x"})
    assert _image(resp).size == (1080, 1920)


def test_story_needs_source(client):
    assert client.post("/v1/memes/story", data={"top_text": "x"}).status_code == 400


def test_suggestions_fallback(client):
    with patch.object(settings, "anthropic_api_key", None):
        resp = client.post("/v1/suggestions", json={"template_id": "drake"})
    body = resp.json()
    assert resp.status_code == 200
    assert body["confidence"] == 0.6
    assert body["top_text"] and body["bottom_text"]


def test_suggestions_from_image_url(client):
    data_uri = "data:image/png;base64," + base64.b64encode(make_png((64, 64))).decode("ascii")
    with patch.object(settings, "anthropic_api_key", "test-key"), \
            patch("memegen.services.llm.suggestions.call_claude") as mock_call:
        mock_call.side_effect = [
            '{"description": "a cat", "objects": ["cat"], "emotions": ["smug"], "context": "sitting", "memePotential": 6}',
            '"Me at 3am" | "Still awake"',
        ]
        resp = client.post("/v1/suggestions", json={"template_id": "drake", "image_url": data_uri})

    body = resp.json()
    assert resp.status_code == 200
    assert body["top_text"] == "Me at 3am"
    assert body["confidence"] == pytest.approx(0.9)
    assert mock_call.call_args_list[0].kwargs["image"].startswith(b"\x89PNG")


def test_suggestions_bad_image_url(client):
    resp = client.post("/v1/suggestions", json={"template_id": "drake", "image_url": "data:image/png;base64,!!"})
    assert resp.status_code == 422


def test_publish_list_react_flow(client, template_image):
    resp = client.post("/v1/feed", json={"template_id": "drake", "top_text": "a", "bottom_text": "b"})
    assert resp.status_code == 200
    body = resp.json()
    meme_id = body["meme"]["id"]
    assert body["engagement"]["total_created"] == 1

    page = client.get("/v1/feed").json()
    assert [m["id"] for m in page["items"]] == [meme_id]
    assert page["has_more"] is False

    assert client.get(f"/v1/feed/{meme_id}").json()["top_text"] == "a"

    reacted = client.post(f"/v1/feed/{meme_id}/reactions", json={"reaction": "fire"}).json()
    assert reacted["selection"] == "fire" and reacted["reactions_count"] == 1


def test_feed_missing_meme(client):
    assert client.get("/v1/feed/unknown").status_code == 404


def test_feed_bad_reaction(client, template_image):
    meme_id = client.post("/v1/feed", json={"template_id": "drake", "top_text": "a"}).json()["meme"]["id"]
    assert client.post(f"/v1/feed/{meme_id}/reactions", json={"reaction": "meh"}).status_code == 400


def test_engagement_state(client, template_image):
    assert client.get("/v1/engagement").json()["total_created"] == 0
    client.post("/v1/feed", json={"template_id": "drake", "top_text": "a"})
    state = client.get("/v1/engagement").json()
    assert state["total_created"] == 1
    assert state["current_streak_days"] == 1
