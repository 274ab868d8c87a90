# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Tests for the boto3 client factory."""

import io
import threading
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import boto3
import pytest
from botocore.response import StreamingBody
from botocore.stub import Stubber

from shapeql.backends import (
    AsyncServiceClient,
    Boto3ClientFactory,
    boto3_service_name,
    read_streaming_bodies,
)
from shapeql.core.config import BackendConfig


def fake_boto3_client(**methods):
    """Object shaped like a boto3 client: snake_case methods plus meta.service_model."""
    operation_names = [
        "".join(part.capitalize() for part in name.split("_")) for name in methods
    ]
    return SimpleNamespace(
        meta=SimpleNamespace(service_model=SimpleNamespace(operation_names=operation_names)),
        **methods,
    )


class RecordingBody(StreamingBody):
    """StreamingBody that remembers which threads read it."""

    def __init__(self, data: bytes):
        super().__init__(io.BytesIO(data), len(data))
        self.read_threads = []

    def read(self, amt=None):
        self.read_threads.append(threading.current_thread())
        return super().read(amt)


class TestServiceName:
    """Tests for serviceId to botocore name mapping."""

    def test_lowercased(self):
        assert boto3_service_name("EC2") == "ec2"

    def test_spaces_hyphenated(self):
        assert boto3_service_name("SageMaker Runtime") == "sagemaker-runtime"


class TestAsyncServiceClient:
    """Tests for the camelCase async view of a boto3 client."""

    def test_method_names(self):
        client = AsyncServiceClient(fake_boto3_client(
            describe_instances=lambda **kw: {}, run_instances=lambda **kw: {},
        ))
        assert client.method_names == ["describeInstances", "runInstances"]

    @pytest.mark.asyncio
    async def test_call_forwards_params(self):
        describe = MagicMock(return_value={"Reservations": []})
        client = AsyncServiceClient(fake_boto3_client(describe_instances=describe))

        result = await client.describeInstances(MaxResults=5)

        assert result == {"Reservations": []}
        describe.assert_called_once_with(MaxResults=5)

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        failing = MagicMock(side_effect=RuntimeError("throttled"))
        client = AsyncServiceClient(fake_boto3_client(describe_instances=failing))

        with pytest.raises(RuntimeError, match="throttled"):
            await client.describeInstances()

    def test_unknown_method(self):
        client = AsyncServiceClient(fake_boto3_client(describe_instances=lambda **kw: {}))
        assert not hasattr(client, "describe_instances")
        with pytest.raises(AttributeError, match="terminateInstances"):
            client.terminateInstances

    @pytest.mark.asyncio
    async def test_real_client_with_stubber(self):
        session = boto3.Session(
            region_name="us-east-1",
            aws_access_key_id="testing",
            aws_secret_access_key="testing",
        )
        boto_client = session.client("ec2")
        stubber = Stubber(boto_client)
        stubber.add_response(
            "describe_instances",
            {"Reservations": [{"ReservationId": "r-1", "Instances": []}]},
            {"MaxResults": 5},
        )

        client = AsyncServiceClient(boto_client)
        assert "describeInstances" in client.method_names

        with stubber:
            result = await client.describeInstances(MaxResults=5)

        assert result["Reservations"][0]["ReservationId"] == "r-1"
        stubber.assert_no_pending_responses()


class TestStreamingBodies:
    """Tests for reading streamed response members."""

    @pytest.mark.asyncio
    async def test_body_read_off_event_loop(self):
        body = RecordingBody(b"hello")
        client = AsyncServiceClient(fake_boto3_client(
            get_object=lambda **kw: {"Body": body, "ContentLength": 5},
        ))

        result = await client.getObject(Bucket="b", Key="k")

        assert result == {"Body": b"hello", "ContentLength": 5}
        assert body.read_threads
        assert threading.current_thread() not in body.read_threads

    def test_original_response_untouched(self):
        body = RecordingBody(b"abc")
        response = {"Body": body}

        assert read_streaming_bodies(response) == {"Body": b"abc"}
        assert response["Body"] is body

    def test_responses_without_streams_returned_as_is(self):
        response = {"ETag": "x"}
        assert read_streaming_bodies(response) is response
        assert read_streaming_bodies(None) is None


class TestBoto3ClientFactory:
    """Tests for client construction and caching."""

    @pytest.fixture
    def session(self):
        session = MagicMock()
        session.client.side_effect = lambda name, **kwargs: fake_boto3_client(
            describe_instances=lambda **kw: {"service": name}
        )
        return session

    def test_version(self):
        assert Boto3ClientFactory().version == boto3.__version__

    def test_client_cached(self, session):
        factory = Boto3ClientFactory()
        with patch("shapeql.backends.boto3_client.boto3.Session", return_value=session) as session_cls:
            first = factory.get_client("ec2")
            second = factory.get_client("ec2")

        assert first is second
        session_cls.assert_called_once_with(region_name="us-east-1")
        session.client.assert_called_once_with("ec2")

    def test_separate_clients_per_service(self, session):
        factory = Boto3ClientFactory()
        with patch("shapeql.backends.boto3_client.boto3.Session", return_value=session):
            ec2 = factory.get_client("ec2")
            s3 = factory.get_client("S3")

        assert ec2 is not s3
        assert [c.args[0] for c in session.client.call_args_list] == ["ec2", "s3"]

    def test_backend_config_applied(self, session):
        config = BackendConfig(
            region="eu-west-1",
            profile_name="readonly",
            endpoint_url="http://localhost:4566",
            aws_access_key_id="AKIA",
            aws_secret_access_key="secret",
        )
        factory = Boto3ClientFactory(config)
        with patch("shapeql.backends.boto3_client.boto3.Session", return_value=session) as session_cls:
            factory.get_client("ec2")

        session_cls.assert_called_once_with(profile_name="readonly", region_name="eu-west-1")
        session.client.assert_called_once_with(
            "ec2",
            endpoint_url="http://localhost:4566",
            aws_access_key_id="AKIA",
            aws_secret_access_key="secret",
        )

    @pytest.mark.asyncio
    async def test_client_methods_are_async(self, session):
        factory = Boto3ClientFactory()
        with patch("shapeql.backends.boto3_client.boto3.Session", return_value=session):
            client = factory.get_client("ec2")

        assert await client.describeInstances() == {"service": "ec2"}
