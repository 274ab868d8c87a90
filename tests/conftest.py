# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Pytest fixtures: in-memory service descriptions and a fake backend."""

import copy
import json
from pathlib import Path
from typing import Any, Optional

import pytest

from shapeql.backends.base import ClientFactory
from shapeql.core.models import ServiceAPIDescription


# =============================================================================
# Fake backend
# =============================================================================

class FakeClient:
    """Client whose every method records its call and returns a canned response."""

    def __init__(self, service_identifier: str, responses: dict, errors: dict):
        self.service_identifier = service_identifier
        self.calls: list[tuple[str, dict]] = []
        self.responses = responses
        self.errors = errors

    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)

        async def method(**params):
            self.calls.append((name, params))
            if name in self.errors:
                raise self.errors[name]
            return self.responses.get(name, {})

        return method


class FakeClientFactory(ClientFactory):
    """Client factory handing out FakeClients, one per service identifier."""

    def __init__(self, responses: Optional[dict] = None, errors: Optional[dict] = None):
        self.responses = responses or {}
        self.errors = errors or {}
        self.clients: dict[str, FakeClient] = {}
        self.created: list[str] = []

    @property
    def version(self) -> str:
        return "fake-1.0"

    def get_client(self, service_identifier: str) -> FakeClient:
        if service_identifier not in self.clients:
            self.created.append(service_identifier)
            self.clients[service_identifier] = FakeClient(
                service_identifier, self.responses, self.errors
            )
        return self.clients[service_identifier]


@pytest.fixture
def fake_factory() -> FakeClientFactory:
    return FakeClientFactory()


@pytest.fixture
def make_factory():
    """FakeClientFactory constructor, for tests needing canned responses or errors."""
    return FakeClientFactory


# =============================================================================
# Description documents
# =============================================================================

EC2_DOCUMENT: dict[str, Any] = {
    "metadata": {
        "serviceId": "ec2",
        "endpointPrefix": "ec2",
        "apiVersion": "2016-11-15",
    },
    "operations": {
        "DescribeInstances": {
            "name": "DescribeInstances",
            "output": {"shape": "DescribeInstancesResult"},
        },
        "RunInstances": {
            "name": "RunInstances",
            "input": {"shape": "RunInstancesRequest"},
            "output": {"shape": "Reservation"},
        },
        "RebootInstances": {
            "name": "RebootInstances",
            "input": {"shape": "RebootInstancesRequest"},
        },
    },
    "shapes": {
        "DescribeInstancesResult": {
            "type": "structure",
            "members": {"Reservations": {"shape": "ReservationList"}},
        },
        "ReservationList": {"type": "list", "member": {"shape": "Reservation"}},
        "Reservation": {
            "type": "structure",
            "members": {"InstanceId": {"shape": "String"}},
        },
        "RunInstancesRequest": {
            "type": "structure",
            "required": ["ImageId"],
            "members": {
                "ImageId": {"shape": "String"},
                "KeyName": {"shape": "String"},
            },
        },
        "RebootInstancesRequest": {
            "type": "structure",
            "required": ["InstanceIds"],
            "members": {
                "InstanceIds": {"shape": "InstanceIdStringList"},
                "DryRun": {"shape": "Boolean"},
            },
        },
        "InstanceIdStringList": {"type": "list", "member": {"shape": "String"}},
        "String": {"type": "string"},
        "Boolean": {"type": "boolean"},
    },
}


def s3_document(api_version: str, operation: str) -> dict:
    return {
        "metadata": {
            "serviceId": "S3",
            "endpointPrefix": "s3",
            "apiVersion": api_version,
        },
        "operations": {
            operation: {"name": operation, "output": {"shape": "ListOutput"}},
        },
        "shapes": {
            "ListOutput": {
                "type": "structure",
                "members": {"Buckets": {"type": "list", "member": {"shape": "Bucket"}}},
            },
            "Bucket": {
                "type": "structure",
                "members": {
                    "Name": {"type": "string"},
                    "CreationDate": {"type": "timestamp"},
                },
            },
        },
    }


@pytest.fixture
def ec2_document() -> dict:
    return copy.deepcopy(EC2_DOCUMENT)


@pytest.fixture
def ec2_description(ec2_document) -> ServiceAPIDescription:
    return ServiceAPIDescription.from_document(ec2_document)


@pytest.fixture
def descriptions_dir(tmp_path, ec2_document) -> Path:
    """Description directory in botocore layout plus a flat minified file."""
    ec2_dir = tmp_path / "apis" / "ec2" / "2016-11-15"
    ec2_dir.mkdir(parents=True)
    (ec2_dir / "service-2.json").write_text(json.dumps(ec2_document))
    (ec2_dir / "paginators-1.json").write_text(json.dumps({"pagination": {}}))

    flat = tmp_path / "apis" / "s3-2006-03-01.min.json"
    flat.write_text(json.dumps(s3_document("2006-03-01", "ListBuckets")))
    return tmp_path / "apis"


@pytest.fixture
def make_s3_document():
    """Factory for S3 descriptions differing in version and operation name."""
    return s3_document
