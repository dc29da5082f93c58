from datetime import datetime, timezone
from unittest.mock import patch, MagicMock
import io
import json

import pytest
from botocore import UNSIGNED
from botocore.exceptions import ClientError

from wagon.cli import main


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": "err"}}, "op")


@pytest.fixture
def client(monkeypatch):
    monkeypatch.delenv("WAGON_USERNAME", raising=False)
    monkeypatch.delenv("WAGON_PASSPHRASE", raising=False)
    with patch("wagon.aws.transport.boto3") as mock_boto:
        mock_client = MagicMock()
        mock_boto.client.return_value = mock_client
        yield mock_client, mock_boto


URL = ["--url", "s3://bucket/releases"]


class TestCli:
    def test_exists(self, client, capsys):
        mock_client, _ = client
        main(URL + ["exists", "com/a.jar"])
        assert capsys.readouterr().out.strip() == "true"
        mock_client.head_object.assert_called_once_with(Bucket="bucket", Key="releases/com/a.jar")

    def test_exists_missing(self, client, capsys):
        mock_client, _ = client
        mock_client.head_object.side_effect = _client_error("404")
        main(URL + ["exists", "com/a.jar"])
        assert capsys.readouterr().out.strip() == "false"

    def test_list(self, client, capsys):
        mock_client, _ = client
        paginator = MagicMock()
        paginator.paginate.return_value = [{"Contents": [{"Key": "releases/a/x"}]}]
        mock_client.get_paginator.return_value = paginator
        main(URL + ["list", "a/"])
        assert json.loads(capsys.readouterr().out) == ["releases/a/x"]

    def test_get(self, client, capsys, tmp_path):
        mock_client, _ = client
        mock_client.get_object.return_value = {"Body": io.BytesIO(b"jar")}
        destination = tmp_path / "a.jar"
        main(URL + ["get", "com/a.jar", str(destination)])
        assert capsys.readouterr().out.strip() == "OK"
        assert destination.read_bytes() == b"jar"

    def test_put_with_credentials(self, client, capsys, tmp_path):
        mock_client, mock_boto = client
        source = tmp_path / "a.jar"
        source.write_bytes(b"jar")
        main(URL + ["-u", "AKIA", "-P", "secret", "put", str(source), "com/a.jar"])
        assert capsys.readouterr().out.strip() == "OK"
        kwargs = mock_boto.client.call_args.kwargs
        assert kwargs["aws_access_key_id"] == "AKIA"
        assert mock_client.put_object.call_args.kwargs["Key"] == "releases/com/a.jar"

    def test_credentials_from_env(self, client, monkeypatch, capsys):
        _, mock_boto = client
        monkeypatch.setenv("WAGON_USERNAME", "AKIA")
        monkeypatch.setenv("WAGON_PASSPHRASE", "secret")
        main(URL + ["exists", "a.jar"])
        assert mock_boto.client.call_args.kwargs["aws_secret_access_key"] == "secret"

    def test_partial_credentials(self, client, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(URL + ["-u", "AKIA", "exists", "a.jar"])
        assert excinfo.value.code == 1
        assert "Operation failed" in capsys.readouterr().err

    def test_is_newer(self, client, capsys):
        mock_client, _ = client
        mock_client.head_object.return_value = {
            "LastModified": datetime(2024, 1, 1, tzinfo=timezone.utc)
        }
        main(URL + ["is-newer", "a.jar", "0"])
        assert capsys.readouterr().out.strip() == "true"

    def test_get_if_newer_skips(self, client, capsys, tmp_path):
        mock_client, _ = client
        mock_client.head_object.return_value = {
            "LastModified": datetime(2024, 1, 1, tzinfo=timezone.utc)
        }
        main(URL + ["get-if-newer", "a.jar", str(tmp_path / "a.jar"), "99999999999999"])
        assert capsys.readouterr().out.strip() == "false"
        mock_client.get_object.assert_not_called()

    def test_get_missing_resource(self, client, capsys, tmp_path):
        mock_client, _ = client
        mock_client.get_object.side_effect = _client_error("NoSuchKey")
        with pytest.raises(SystemExit) as excinfo:
            main(URL + ["get", "missing.jar", str(tmp_path / "m.jar")])
        assert excinfo.value.code == 1
        assert "does not exist" in capsys.readouterr().err

    def test_wrong_argument_count(self, client, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(URL + ["get", "only-one"])
        assert excinfo.value.code == 1
        assert "Invalid arguments" in capsys.readouterr().err

    def test_invalid_config(self, client, capsys):
        with pytest.raises(SystemExit):
            main(URL + ["--config", "{bad", "exists", "a.jar"])
        assert "Invalid --config JSON" in capsys.readouterr().err

    def test_config_must_be_object(self, client, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(URL + ["--config", "[1]", "exists", "a.jar"])
        assert excinfo.value.code == 1
        assert "expected an object" in capsys.readouterr().err

    def test_no_flags_connects_anonymously(self, client, capsys):
        _, mock_boto = client
        main(URL + ["exists", "a.jar"])
        assert "aws_access_key_id" not in mock_boto.client.call_args.kwargs
        assert mock_boto.client.call_args.kwargs["config"].signature_version is UNSIGNED

    def test_unsupported_scheme(self, client, capsys):
        with pytest.raises(SystemExit):
            main(["--url", "ftp://host/path", "exists", "a.jar"])
        assert "Unsupported repository scheme" in capsys.readouterr().err
