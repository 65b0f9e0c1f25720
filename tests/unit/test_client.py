"""Unit tests for App Runner client construction."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from apprunner_autoscaling.config.models import AwsConfig
from apprunner_autoscaling.resources.client import ControlPlane, build_apprunner_client


def _mock_boto3():
    """Create a mock boto3 module for sys.modules patching."""
    mock_boto3_mod = MagicMock()
    session = mock_boto3_mod.session.Session.return_value
    return mock_boto3_mod, session


class TestBuildApprunnerClient:
    def test_default_region_and_chain(self):
        boto3_mod, session = _mock_boto3()

        with patch.dict("sys.modules", {"boto3": boto3_mod}):
            client = build_apprunner_client()

        boto3_mod.session.Session.assert_called_once_with(region_name="us-east-1")
        session.client.assert_called_once_with("apprunner", endpoint_url=None)
        assert client is session.client.return_value

    def test_profile_and_endpoint(self):
        boto3_mod, session = _mock_boto3()
        config = AwsConfig(
            region="eu-west-1",
            profile_name="deploy",
            endpoint_url="http://localhost:4566",
        )

        with patch.dict("sys.modules", {"boto3": boto3_mod}):
            build_apprunner_client(config)

        boto3_mod.session.Session.assert_called_once_with(
            region_name="eu-west-1", profile_name="deploy"
        )
        session.client.assert_called_once_with(
            "apprunner", endpoint_url="http://localhost:4566"
        )

    def test_static_credentials_are_unwrapped(self):
        boto3_mod, _session = _mock_boto3()
        config = AwsConfig(
            access_key_id="AKIA123",
            secret_access_key="s3cret",
            session_token="tok",
        )

        with patch.dict("sys.modules", {"boto3": boto3_mod}):
            build_apprunner_client(config)

        kwargs = boto3_mod.session.Session.call_args.kwargs
        assert kwargs["aws_access_key_id"] == "AKIA123"
        assert kwargs["aws_secret_access_key"] == "s3cret"
        assert kwargs["aws_session_token"] == "tok"


class TestControlPlaneProtocol:
    def test_fake_satisfies_protocol(self, control_plane):
        assert isinstance(control_plane, ControlPlane)

    def test_object_without_actions_does_not(self):
        assert not isinstance(object(), ControlPlane)
