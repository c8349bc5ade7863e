import json
import os
import tempfile
import unittest
from unittest.mock import Mock, patch

import requests

from bsnmgr.config import BsnConfig
from bsnmgr.controller.bsn_controller import (
    BsnController,
    _bulk_result_from_dict,
    _content_from_dict,
    _device_from_dict,
)
from bsnmgr.errors import (
    ApiError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from bsnmgr.models import ItemFailure


def _response(status_code=200, payload=None, *, body=None, reason="OK", url="https://x"):
    resp = requests.Response()
    resp.status_code = status_code
    resp.reason = reason
    resp.url = url
    if body is not None:
        resp._content = body
    elif payload is not None:
        resp._content = json.dumps(payload).encode("utf-8")
    else:
        resp._content = b""
    resp._content_consumed = True
    return resp


def _token_response():
    resp = Mock()
    resp.status_code = 200
    resp.json.return_value = {"access_token": "tok", "expires_in": 3600}
    return resp


class TestControllerHelpers(unittest.TestCase):
    def test_content_from_dict_parses_fields(self) -> None:
        info = _content_from_dict(
            {
                "id": 42,
                "name": "promo.mp4",
                "mediaType": "Video",
                "fileSize": "2048",
                "virtualPath": "/videos/",
                "creationDate": "2024-05-01T10:00:00Z",
                "lastModifiedDate": "0001-01-01T00:00:00Z",
            }
        )
        self.assertEqual(info.content_id, 42)
        self.assertEqual(info.type, "File")
        self.assertEqual(info.file_size, 2048)
        self.assertEqual(info.creation_date.year, 2024)
        self.assertIsNone(info.last_modified_date)

    def test_device_from_dict_reads_settings(self) -> None:
        d = _device_from_dict(
            {
                "id": 9,
                "serial": "XD1234",
                "model": "XD1035",
                "settings": {"name": "Lobby", "group": {"name": "Default"}},
            }
        )
        self.assertEqual(d.device_id, 9)
        self.assertEqual(d.display_name, "Lobby")
        self.assertEqual(d.group_name, "Default")

    def test_bulk_result_from_dict_mixed_errors(self) -> None:
        r = _bulk_result_from_dict(
            {
                "deletedIds": [10, "11"],
                "errors": ["quota exceeded", {"id": 12, "message": "locked"}],
            }
        )
        self.assertEqual(r.succeeded_ids, [10, 11])
        self.assertEqual(
            r.failures,
            [ItemFailure(None, "quota exceeded"), ItemFailure(12, "locked")],
        )


class TestBsnControllerMocked(unittest.TestCase):
    def setUp(self) -> None:
        self.config = BsnConfig(client_id="cid", client_secret="sec", retry_count=2)
        self.session = Mock()
        self.session.post.return_value = _token_response()
        self.controller = BsnController(self.config, session=self.session)

    def test_list_networks_sends_bearer_token(self) -> None:
        self.session.request.return_value = _response(
            payload=[{"id": 1, "name": "Alpha"}, {"id": 2, "name": "BETA", "isLockedOut": True}]
        )

        networks = self.controller.list_networks()

        self.assertEqual([n.name for n in networks], ["Alpha", "BETA"])
        self.assertTrue(networks[1].is_locked_out)
        args, kwargs = self.session.request.call_args
        self.assertEqual(args[0], "GET")
        self.assertTrue(args[1].endswith("/2022/06/REST/Self/Networks"))
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer tok")
        self.assertEqual(kwargs["timeout"], 30.0)

    def test_set_network_by_id(self) -> None:
        self.session.request.return_value = _response(status_code=204)
        self.controller.set_network_by_id(2)
        args, kwargs = self.session.request.call_args
        self.assertEqual(args[0], "PUT")
        self.assertEqual(kwargs["json"], {"id": 2})

    def test_set_network_rejects_non_positive(self) -> None:
        with self.assertRaises(ValidationError):
            self.controller.set_network_by_id(0)
        self.session.request.assert_not_called()

    def test_list_content_follows_markers(self) -> None:
        self.session.request.side_effect = [
            _response(payload={"items": [{"id": 1, "name": "a"}], "isTruncated": True, "nextMarker": "m1"}),
            _response(payload={"items": [{"id": 2, "name": "b"}], "isTruncated": False}),
        ]

        files = self.controller.list_content("[Name] CONTAINS 'x'")

        self.assertEqual([f.content_id for f in files], [1, 2])
        first = self.session.request.call_args_list[0].kwargs["params"]
        second = self.session.request.call_args_list[1].kwargs["params"]
        self.assertEqual(first["filter"], "[Name] CONTAINS 'x'")
        self.assertNotIn("marker", first)
        self.assertEqual(second["marker"], "m1")

    def test_delete_content_requires_filter(self) -> None:
        with self.assertRaises(ValidationError):
            self.controller.delete_content("  ")

    def test_delete_content_returns_bulk_result(self) -> None:
        self.session.request.return_value = _response(
            payload={"deletedIds": [10, 11], "errors": [{"id": 12, "message": "locked"}]}
        )
        result = self.controller.delete_content("[Type] IS 'Video'")
        self.assertEqual(result.succeeded_ids, [10, 11])
        self.assertEqual(result.failures[0].item_ref, 12)
        self.assertEqual(self.session.request.call_args.args[0], "DELETE")

    def test_list_presentations_follows_markers(self) -> None:
        self.session.request.side_effect = [
            _response(
                payload={
                    "items": [{"id": 5, "name": "spring", "publishState": "Draft"}],
                    "isTruncated": True,
                    "nextMarker": "p1",
                }
            ),
            _response(payload={"items": [{"id": 6, "name": "summer"}], "isTruncated": False}),
        ]

        presentations = self.controller.list_presentations("[Name] CONTAINS 's'")

        self.assertEqual([p.presentation_id for p in presentations], [5, 6])
        self.assertEqual(presentations[0].publish_state, "Draft")
        first_call = self.session.request.call_args_list[0]
        self.assertTrue(first_call.args[1].endswith("/Presentations"))
        self.assertEqual(self.session.request.call_args_list[1].kwargs["params"]["marker"], "p1")

    def test_delete_presentations_returns_bulk_result(self) -> None:
        self.session.request.return_value = _response(
            payload={"deletedCount": 1, "deletedIds": [5], "errors": ["presentation 6 is scheduled"]}
        )
        result = self.controller.delete_presentations("[Name] CONTAINS 's'")
        self.assertEqual(result.succeeded_ids, [5])
        self.assertEqual(result.failures, [ItemFailure(None, "presentation 6 is scheduled")])
        args, kwargs = self.session.request.call_args
        self.assertEqual(args[0], "DELETE")
        self.assertEqual(kwargs["params"], {"filter": "[Name] CONTAINS 's'"})

        with self.assertRaises(ValidationError):
            self.controller.delete_presentations("")

    def test_group_get_and_delete(self) -> None:
        self.session.request.side_effect = [
            _response(payload={"id": 30, "name": "Lobby screens", "link": "/Groups/Regular/30"}),
            _response(status_code=204),
        ]

        group = self.controller.get_group(30)
        self.controller.delete_group(30)

        self.assertEqual(group.name, "Lobby screens")
        self.assertEqual(group.link, "/Groups/Regular/30")
        get_call, delete_call = self.session.request.call_args_list
        self.assertTrue(get_call.args[1].endswith("/Groups/Regular/30"))
        self.assertEqual(delete_call.args[0], "DELETE")
        with self.assertRaises(ValidationError):
            self.controller.delete_group(-1)

    def test_get_device_maps_http_404_to_not_found(self) -> None:
        self.session.request.return_value = _response(
            status_code=404,
            payload={"error": {"message": "device not found"}},
            reason="Not Found",
        )

        with self.assertRaises(NotFoundError) as ctx:
            self.controller.get_device("XD0000")
        self.assertEqual(str(ctx.exception), "device not found")
        self.assertEqual(ctx.exception.details["status_code"], 404)

    def test_retry_on_429(self) -> None:
        self.session.request.side_effect = [
            _response(status_code=429, reason="Too Many Requests"),
            _response(status_code=429, reason="Too Many Requests"),
            _response(payload={"id": 9, "serial": "XD1234"}),
        ]

        with patch("time.sleep", return_value=None) as sleep:
            device = self.controller.get_device_by_id(9)

        self.assertEqual(device.serial, "XD1234")
        self.assertEqual(self.session.request.call_count, 3)
        self.assertEqual([c.args[0] for c in sleep.call_args_list], [1.0, 2.0])

    def test_retry_exhausted_raises_rate_limit(self) -> None:
        self.session.request.return_value = _response(status_code=429)

        with patch("time.sleep", return_value=None):
            with self.assertRaises(RateLimitError):
                self.controller.get_device_by_id(9)

        # retry_count=2 -> 1 attempt + 2 retries
        self.assertEqual(self.session.request.call_count, 3)

    def test_5xx_is_retried_but_4xx_is_not(self) -> None:
        self.session.request.side_effect = [
            _response(status_code=503),
            _response(payload={"id": 9, "serial": "XD1234"}),
        ]
        with patch("time.sleep", return_value=None):
            self.controller.get_device_by_id(9)
        self.assertEqual(self.session.request.call_count, 2)

        self.session.request.reset_mock(side_effect=True)
        self.session.request.return_value = _response(status_code=418)
        with patch("time.sleep", return_value=None) as sleep:
            with self.assertRaises(ApiError):
                self.controller.get_device_by_id(9)
        sleep.assert_not_called()

    def test_connection_error_maps_to_network_error(self) -> None:
        self.session.request.side_effect = requests.ConnectionError("down")
        with patch("time.sleep", return_value=None):
            with self.assertRaises(NetworkError):
                self.controller.list_networks()
        self.assertEqual(self.session.request.call_count, 3)

    def test_invalid_json_is_api_error(self) -> None:
        self.session.request.return_value = _response(body=b"<html>")
        with self.assertRaises(ApiError):
            self.controller.list_networks()

    def test_rdws_calls_address_player_by_serial(self) -> None:
        self.session.request.return_value = _response(
            payload={
                "data": {
                    "result": {
                        "gateway": "10.0.0.1",
                        "dns": ["8.8.8.8"],
                        "connectedToRouter": True,
                        "connectedToInternet": False,
                    }
                }
            }
        )

        info = self.controller.get_diagnostics("XD1234")

        self.assertEqual(info.gateway, "10.0.0.1")
        self.assertEqual(info.dns, ["8.8.8.8"])
        self.assertTrue(info.connected_to_router)
        self.assertFalse(info.connected_to_internet)
        args, kwargs = self.session.request.call_args
        self.assertEqual(args[1], "https://ws.bsn.cloud/rest/v1/diagnostics/")
        self.assertEqual(
            kwargs["params"],
            {"destinationType": "player", "destinationName": "XD1234"},
        )

    def test_player_file_rename_and_delete(self) -> None:
        self.session.request.return_value = _response(payload={"data": {"result": {"success": True}}})
        self.assertTrue(self.controller.rename_player_file("XD1234", "/sd/a b.txt", "c.txt"))
        args, kwargs = self.session.request.call_args
        self.assertEqual(args[0], "POST")
        self.assertTrue(args[1].endswith("/files/sd/a%20b.txt"))
        self.assertEqual(kwargs["json"], {"data": {"name": "c.txt"}})

        self.session.request.return_value = _response(payload={"data": {"result": {}}})
        self.assertFalse(self.controller.delete_player_file("XD1234", "sd/a.txt"))

    def test_list_player_files(self) -> None:
        self.session.request.return_value = _response(
            payload={
                "data": {
                    "result": {
                        "files": [
                            {"name": "a.txt", "path": "sd/a.txt", "type": "file", "stat": {"size": 5}},
                            {"name": "logs", "path": "sd/logs", "type": "dir"},
                        ]
                    }
                }
            }
        )
        files = self.controller.list_player_files("XD1234", "sd")
        self.assertEqual([f.name for f in files], ["a.txt", "logs"])
        self.assertEqual(files[0].size, 5)
        self.assertTrue(files[1].is_dir)
        self.assertTrue(self.session.request.call_args.args[1].endswith("/files/sd/"))

    def test_local_dws_toggle(self) -> None:
        self.session.request.return_value = _response(payload={"data": {"result": {"success": True}}})
        self.assertTrue(self.controller.set_local_dws("XD1234", False))
        self.assertEqual(self.session.request.call_args.kwargs["json"], {"data": {"enabled": False}})

    def test_download_content_streams_to_file(self) -> None:
        self.session.request.return_value = _response(body=b"hello world")

        with tempfile.TemporaryDirectory() as tmp:
            target = os.path.join(tmp, "sub", "out.bin")
            written = self.controller.download_content(5, target)

            self.assertEqual(written, 11)
            with open(target, "rb") as f:
                self.assertEqual(f.read(), b"hello world")
            self.assertTrue(self.session.request.call_args.kwargs["stream"])

            with self.assertRaises(ValidationError):
                self.controller.download_content(5, target)

    def test_authenticate_fetches_token(self) -> None:
        self.controller.authenticate()
        self.assertEqual(self.session.post.call_count, 1)


if __name__ == "__main__":
    unittest.main()
