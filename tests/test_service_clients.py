from pathlib import Path
from unittest.mock import Mock, patch
import sys

import pytest
import requests

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.core.config import ServiceConfig
from src.core.errors import ServiceError, ServiceResponseError, ServiceUnavailableError
from src.dispatch.client import DispatchClient
from src.dispatch.config import TransportConfig
from src.dispatch.models import DispatchStatus
from src.preview.client import AnalysisClient
from src.preview.models import PreviewItem
from src.upload.models import FileBlob


def _response(status_code, payload=None, json_error=False):
    response = Mock()
    response.status_code = status_code
    response.url = "http://api.test/endpoint"
    if json_error:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def service_config():
    return ServiceConfig(api_base_url="http://api.test/", request_timeout=None)


@pytest.fixture
def blobs():
    return FileBlob(name="roster.xlsx", content=b"roster"), FileBlob(name="notices.xlsx", content=b"notices")


@pytest.fixture
def preview_payload():
    return [
        {
            "teacher_name": "Wang",
            "email": "w@school.edu",
            "data_rows": [
                {
                    "date": "2025-03-10",
                    "period": "3",
                    "cls": "801",
                    "course": "Math",
                    "type": "代課",
                    "original_teacher": "Wang",
                    "sub_teacher": "Chen",
                    "original_date": None,
                    "original_period": None,
                }
            ],
        }
    ]


def test_base_url_trailing_slash_stripped(service_config):
    assert service_config.endpoint("/api/preview") == "http://api.test/api/preview"


def test_base_url_from_env(monkeypatch):
    monkeypatch.setenv("NOTIFIER_API_URL", "https://notices.school.edu/")
    monkeypatch.setenv("NOTIFIER_REQUEST_TIMEOUT", "30")

    config = ServiceConfig()

    assert config.api_base_url == "https://notices.school.edu"
    assert config.request_timeout == 30.0


def test_preview_sends_multipart(service_config, blobs, preview_payload):
    client = AnalysisClient(service_config)

    with patch("src.preview.client.requests.post") as mock_post:
        mock_post.return_value = _response(200, preview_payload)
        items = client.preview(*blobs)

    args, kwargs = mock_post.call_args
    assert args[0] == "http://api.test/api/preview"
    assert set(kwargs["files"]) == {"teacher_file", "sub_file"}
    assert kwargs["files"]["teacher_file"][0] == "roster.xlsx"
    assert kwargs["timeout"] is None
    assert items[0].teacher_name == "Wang"
    assert items[0].data_rows[0].class_name == "801"


def test_preview_structured_error(service_config, blobs):
    client = AnalysisClient(service_config)

    with patch("src.preview.client.requests.post") as mock_post:
        mock_post.return_value = _response(400, {"detail": "Missing column: 教師姓名"})
        with pytest.raises(ServiceError) as excinfo:
            client.preview(*blobs)

    assert excinfo.value.status_code == 400
    assert excinfo.value.detail == "Missing column: 教師姓名"


def test_preview_validation_error_list(service_config, blobs):
    client = AnalysisClient(service_config)
    body = {"detail": [{"loc": ["body", "sub_file"], "msg": "field required"}]}

    with patch("src.preview.client.requests.post") as mock_post:
        mock_post.return_value = _response(422, body)
        with pytest.raises(ServiceError) as excinfo:
            client.preview(*blobs)

    assert excinfo.value.detail == "field required"


def test_preview_error_without_json_body(service_config, blobs):
    client = AnalysisClient(service_config)

    with patch("src.preview.client.requests.post") as mock_post:
        mock_post.return_value = _response(502, json_error=True)
        with pytest.raises(ServiceError) as excinfo:
            client.preview(*blobs)

    assert excinfo.value.detail is None


def test_preview_detail_passed_through_verbatim(service_config, blobs):
    client = AnalysisClient(service_config)
    detail = "Column <Email> missing in sheet 'Teachers'\nrow 3"

    with patch("src.preview.client.requests.post") as mock_post:
        mock_post.return_value = _response(400, {"detail": detail})
        with pytest.raises(ServiceError) as excinfo:
            client.preview(*blobs)

    assert excinfo.value.detail == detail


def test_preview_network_failure(service_config, blobs):
    client = AnalysisClient(service_config)

    with patch("src.preview.client.requests.post") as mock_post:
        mock_post.side_effect = requests.ConnectionError("refused")
        with pytest.raises(ServiceUnavailableError):
            client.preview(*blobs)


def test_preview_malformed_body(service_config, blobs):
    client = AnalysisClient(service_config)

    with patch("src.preview.client.requests.post") as mock_post:
        mock_post.return_value = _response(200, {"teachers": []})
        with pytest.raises(ServiceResponseError):
            client.preview(*blobs)

        mock_post.return_value = _response(200, json_error=True)
        with pytest.raises(ServiceResponseError):
            client.preview(*blobs)

        mock_post.return_value = _response(200, [{"teacher_name": "Wang", "data_rows": []}])
        with pytest.raises(ServiceResponseError):
            client.preview(*blobs)


def test_send_posts_config_and_all_notifications(service_config, preview_payload):
    client = DispatchClient(service_config)
    items = [
        PreviewItem.model_validate(preview_payload[0]),
        PreviewItem.model_validate({**preview_payload[0], "teacher_name": "Li", "email": None}),
    ]
    transport = TransportConfig()

    with patch("src.dispatch.client.requests.post") as mock_post:
        mock_post.return_value = _response(
            200,
            [
                {"teacher_name": "Wang", "status": "success"},
                {"teacher_name": "Li", "status": "no_email"},
            ],
        )
        results = client.send(transport, items)

    args, kwargs = mock_post.call_args
    assert args[0] == "http://api.test/api/send"
    assert kwargs["json"]["config"]["smtp_server"] == "mock"
    assert [n["teacher_name"] for n in kwargs["json"]["notifications"]] == ["Wang", "Li"]
    assert kwargs["json"]["notifications"][1]["email"] is None
    assert [r.status for r in results] == [DispatchStatus.SUCCESS, DispatchStatus.NO_EMAIL]


def test_send_error_ignores_body(service_config):
    client = DispatchClient(service_config)

    with patch("src.dispatch.client.requests.post") as mock_post:
        response = _response(500, {"detail": "smtp exploded"})
        mock_post.return_value = response
        with pytest.raises(ServiceError) as excinfo:
            client.send(TransportConfig(), [])

    assert excinfo.value.detail is None
    response.json.assert_not_called()


def test_send_timeout(service_config):
    client = DispatchClient(service_config)

    with patch("src.dispatch.client.requests.post") as mock_post:
        mock_post.side_effect = requests.Timeout("Request timed out")
        with pytest.raises(ServiceUnavailableError):
            client.send(TransportConfig(), [])


def test_send_unexpected_results_shape(service_config):
    client = DispatchClient(service_config)

    with patch("src.dispatch.client.requests.post") as mock_post:
        mock_post.return_value = _response(200, [{"teacher_name": "Wang", "status": "bounced"}])
        with pytest.raises(ServiceResponseError):
            client.send(TransportConfig(), [])
