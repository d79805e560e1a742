import base64

import httpx
import pytest

from fluxvid.services.decoder import decode_video, extract_video_from_json, normalise_video_data
from fluxvid.services.errors import EmptyResponseError, MissingVideoPayloadError

VIDEO_B64 = base64.b64encode(b"\x00\x00\x00\x18ftypmp42 fake video").decode()


def _json_response(body):
    return httpx.Response(200, json=body)


def test_binary_body_becomes_data_uri():
    response = httpx.Response(200, content=b"webm-bytes", headers={"content-type": "video/webm"})

    decoded = decode_video(response)

    assert decoded.video_ref == "data:video/webm;base64," + base64.b64encode(b"webm-bytes").decode()
    assert decoded.mime_type == "video/webm"


@pytest.mark.parametrize("content_type", [None, "application/octet-stream"])
def test_binary_body_defaults_to_mp4(content_type):
    headers = {"content-type": content_type} if content_type else {}
    response = httpx.Response(200, content=b"raw", headers=headers)

    assert decode_video(response).video_ref.startswith("data:video/mp4;base64,")


def test_json_base64_uses_reported_mime_type():
    decoded = decode_video(_json_response({"video": VIDEO_B64, "mime_type": "video/webm"}))

    assert decoded.video_ref == f"data:video/webm;base64,{VIDEO_B64}"
    assert decoded.mime_type == "video/webm"


def test_json_url_passes_through():
    decoded = decode_video(_json_response({"video": "https://example.com/a.mp4"}))

    assert decoded.video_ref == "https://example.com/a.mp4"


def test_generated_video_beats_nested_data():
    body = {
        "data": [{"video": "https://example.com/nested.mp4"}],
        "generated_video": "https://example.com/top.mp4",
    }

    assert decode_video(_json_response(body)).video_ref == "https://example.com/top.mp4"


def test_videos_array_searched_before_other_fields():
    body = {
        "meta": {"video": "https://example.com/meta.mp4"},
        "videos": [{"id": 1}, {"video": "https://example.com/first.mp4"}],
    }

    assert extract_video_from_json(body).video == "https://example.com/first.mp4"


def test_deep_search_in_enumeration_order():
    body = {"result": {"outputs": [{"frames": 16}, {"generated_video": VIDEO_B64, "mime_type": "image/gif"}]}}

    found = extract_video_from_json(body)

    assert found.video == VIDEO_B64
    assert found.mime_type == "image/gif"
    # Only video/* types are honoured when wrapping.
    assert decode_video(_json_response(body)).video_ref == f"data:video/mp4;base64,{VIDEO_B64}"


def test_top_level_array_is_searched():
    assert extract_video_from_json([1, "x", {"video": "https://a/b.mp4"}]).video == "https://a/b.mp4"


def test_non_string_video_field_is_skipped():
    body = {"video": {"url": "https://x/y.mp4"}, "other": {"video": "https://x/z.mp4"}}

    assert extract_video_from_json(body).video == "https://x/z.mp4"


def test_search_depth_is_bounded():
    body = {"video": "https://x/deep.mp4"}
    for _ in range(50):
        body = {"wrap": body}

    assert extract_video_from_json(body, max_depth=10) is None
    assert extract_video_from_json(body, max_depth=64).video == "https://x/deep.mp4"


def test_search_node_count_is_bounded():
    body = {"items": [{"n": i} for i in range(500)] + [{"video": "https://x/late.mp4"}]}

    assert extract_video_from_json(body, max_nodes=100) is None
    assert extract_video_from_json(body).video == "https://x/late.mp4"


def test_missing_video_raises():
    with pytest.raises(MissingVideoPayloadError):
        decode_video(_json_response({"status": "ok", "outputs": [1, 2, 3]}))


@pytest.mark.parametrize("content", [b"", b"null", b"{not json", b"0", b"false", b'""'])
def test_empty_or_broken_json_raises(content):
    response = httpx.Response(200, content=content, headers={"content-type": "application/json"})

    with pytest.raises(EmptyResponseError):
        decode_video(response)


@pytest.mark.parametrize("body", [{}, []])
def test_empty_containers_are_searched_not_empty(body):
    with pytest.raises(MissingVideoPayloadError):
        decode_video(_json_response(body))


def test_normalise_strips_whitespace_inside_base64():
    chunked = VIDEO_B64[:8] + "\n" + VIDEO_B64[8:] + "  "

    assert normalise_video_data(chunked) == f"data:video/mp4;base64,{VIDEO_B64}"


def test_normalise_keeps_data_uri():
    uri = "data:video/webm;base64,AAAA"

    assert normalise_video_data("  " + uri) == uri


def test_normalise_leaves_non_base64_literal():
    assert normalise_video_data(" s3://bucket/video.mp4 ") == "s3://bucket/video.mp4"
