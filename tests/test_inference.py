import json

import httpx
import pytest

from fluxvid.models import GenerationRequest
from fluxvid.services.errors import InferenceTimeoutError, MissingCredentialError, UpstreamFailureError
from fluxvid.services.inference import InferenceClient, build_payload

from .conftest import RecordingTransport


def _client(transport, fake_sleep, token="hf_test", **kwargs):
    return InferenceClient(
        token=token,
        http_client=httpx.AsyncClient(transport=transport),
        base_url="https://inference.test/models",
        sleep=fake_sleep,
        **kwargs,
    )


@pytest.fixture
def request_1080():
    return GenerationRequest(prompt="a fox in snow", model_id="org/fox-video", duration=10, fps=30, resolution="1080p")


def test_payload_shape(request_1080):
    payload = build_payload(request_1080)

    assert payload["inputs"] == {
        "prompt": "a fox in snow",
        "fps": 30,
        "num_frames": 300,
        "max_frames": 300,
        "duration_seconds": 10,
        "max_duration_seconds": 10,
        "width": 1920,
        "height": 1080,
    }
    assert payload["parameters"] == {
        "max_video_duration": 10,
        "num_frames": 300,
        "fps": 30,
        "width": 1920,
        "height": 1080,
    }
    assert payload["options"] == {"wait_for_model": True, "use_cache": False}


@pytest.mark.asyncio
async def test_posts_to_model_endpoint_with_bearer(request_1080, fake_sleep):
    transport = RecordingTransport(lambda req: httpx.Response(200, content=b"\x00\x01", headers={"content-type": "video/mp4"}))

    response = await _client(transport, fake_sleep).request_inference(request_1080)

    assert response.status_code == 200
    sent = transport.requests[0]
    assert sent.method == "POST"
    assert str(sent.url) == "https://inference.test/models/org%2Ffox-video"
    assert sent.headers["authorization"] == "Bearer hf_test"
    assert sent.headers["accept"] == "application/json,video/mp4"
    assert json.loads(sent.content)["inputs"]["prompt"] == "a fox in snow"
    assert fake_sleep.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, ""])
async def test_missing_credential_fails_without_network(request_1080, fake_sleep, token):
    transport = RecordingTransport(lambda req: httpx.Response(200))

    with pytest.raises(MissingCredentialError):
        await _client(transport, fake_sleep, token=token).request_inference(request_1080)

    assert transport.requests == []


@pytest.mark.asyncio
async def test_loading_model_is_retried_with_estimated_time(request_1080, fake_sleep):
    responses = [
        httpx.Response(503, json={"error": "Model is loading", "estimated_time": 12.5}),
        httpx.Response(202, json={}),
        httpx.Response(200, json={"video": "https://cdn.test/v.mp4"}),
    ]
    transport = RecordingTransport(lambda req: responses.pop(0))

    response = await _client(transport, fake_sleep).request_inference(request_1080)

    assert response.status_code == 200
    assert len(transport.requests) == 3
    assert fake_sleep.calls == [12.5, 5.0]


@pytest.mark.asyncio
async def test_non_json_backpressure_body_uses_default_wait(request_1080, fake_sleep):
    responses = [httpx.Response(503, text="Service Unavailable"), httpx.Response(200, json={})]
    transport = RecordingTransport(lambda req: responses.pop(0))

    await _client(transport, fake_sleep).request_inference(request_1080)

    assert fake_sleep.calls == [5.0]


@pytest.mark.asyncio
async def test_sixty_one_loading_responses_time_out(request_1080, fake_sleep):
    transport = RecordingTransport(lambda req: httpx.Response(503, json={"estimated_time": 1}))

    with pytest.raises(InferenceTimeoutError):
        await _client(transport, fake_sleep).request_inference(request_1080)

    assert len(transport.requests) == 61
    assert len(fake_sleep.calls) == 60


@pytest.mark.asyncio
async def test_huge_estimate_is_capped(request_1080, fake_sleep):
    responses = [httpx.Response(503, json={"estimated_time": 86400}), httpx.Response(200, json={})]
    transport = RecordingTransport(lambda req: responses.pop(0))

    await _client(transport, fake_sleep, max_wait=60.0).request_inference(request_1080)

    assert fake_sleep.calls == [60.0]


@pytest.mark.asyncio
async def test_cumulative_wait_ceiling(request_1080, fake_sleep):
    transport = RecordingTransport(lambda req: httpx.Response(503, json={"estimated_time": 100}))

    with pytest.raises(InferenceTimeoutError):
        await _client(transport, fake_sleep, max_total_wait=250.0).request_inference(request_1080)

    assert fake_sleep.calls == [100.0, 100.0]


@pytest.mark.asyncio
async def test_hard_failure_returned_without_retry(request_1080, fake_sleep):
    transport = RecordingTransport(lambda req: httpx.Response(500, text="CUDA out of memory"))

    response = await _client(transport, fake_sleep).request_inference(request_1080)

    assert response.status_code == 500
    assert response.text == "CUDA out of memory"
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_transport_error_is_upstream_failure(request_1080, fake_sleep):
    def handler(req):
        raise httpx.ConnectError("connection refused", request=req)

    with pytest.raises(UpstreamFailureError) as excinfo:
        await _client(httpx.MockTransport(handler), fake_sleep).request_inference(request_1080)

    assert excinfo.value.status_code == 502
    assert "connection refused" in excinfo.value.message
