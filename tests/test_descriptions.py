# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Tests for loading service descriptions and selecting API versions.

Tests cover:
- Parsing description documents
- Directory loading (botocore layout and flat files)
- Loading bundled botocore models (with a mocked loader)
- Version ordering and per-namespace selection
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from shapeql.catalog.descriptions import (
    is_newer_version,
    load_botocore_descriptions,
    load_description_file,
    load_descriptions,
    load_descriptions_from_dir,
    select_descriptions,
    version_key,
)
from shapeql.core.config import Config
from shapeql.core.errors import DescriptionLoadError
from shapeql.core.models import ServiceAPIDescription


class TestFromDocument:
    """Tests for ServiceAPIDescription.from_document."""

    def test_metadata(self, ec2_description):
        assert ec2_description.service_identifier == "ec2"
        assert ec2_description.endpoint_namespace == "ec2"
        assert ec2_description.api_version == "2016-11-15"
        assert ec2_description.client_key == "ec2"

    def test_operations(self, ec2_description):
        assert set(ec2_description.operations) == {
            "DescribeInstances", "RunInstances", "RebootInstances",
        }
        describe = ec2_description.operations["DescribeInstances"]
        assert describe.input_shape is None
        assert describe.output_shape == {"shape": "DescribeInstancesResult"}
        assert ec2_description.operations["RebootInstances"].output_shape is None

    def test_read_only(self, ec2_description):
        with pytest.raises(TypeError):
            ec2_description.shapes["New"] = {"type": "string"}
        with pytest.raises(TypeError):
            ec2_description.operations["New"] = None

    def test_service_id_falls_back_to_namespace(self, ec2_document):
        del ec2_document["metadata"]["serviceId"]
        description = ServiceAPIDescription.from_document(ec2_document)
        assert description.service_identifier == "ec2"

    def test_missing_endpoint_prefix(self, ec2_document):
        del ec2_document["metadata"]["endpointPrefix"]
        with pytest.raises(ValueError, match="endpointPrefix"):
            ServiceAPIDescription.from_document(ec2_document)

    def test_client_name_preferred_for_client_key(self, ec2_document):
        description = ServiceAPIDescription.from_document(ec2_document, client_name="ec2-alt")
        assert description.client_key == "ec2-alt"


class TestLoadFromDirectory:
    """Tests for directory loading."""

    def test_loads_both_layouts(self, descriptions_dir):
        descriptions = load_descriptions_from_dir(descriptions_dir)

        assert [d.endpoint_namespace for d in descriptions] == ["ec2", "s3"]
        ec2, s3 = descriptions
        assert ec2.client_name == "ec2"
        assert ec2.source.endswith("service-2.json")
        assert s3.client_name is None
        assert s3.client_key == "S3"

    def test_non_service_documents_skipped(self, descriptions_dir):
        paginators = descriptions_dir / "ec2" / "2016-11-15" / "paginators-1.json"
        assert load_description_file(paginators) is None

    def test_custom_pattern(self, descriptions_dir):
        descriptions = load_descriptions_from_dir(descriptions_dir, pattern="*.min.json")
        assert [d.endpoint_namespace for d in descriptions] == ["s3"]

    def test_malformed_json(self, tmp_path):
        (tmp_path / "broken.json").write_text("{not json")
        with pytest.raises(DescriptionLoadError, match="broken.json"):
            load_descriptions_from_dir(tmp_path)

    def test_missing_directory(self, tmp_path):
        with pytest.raises(DescriptionLoadError, match="not a directory"):
            load_descriptions_from_dir(tmp_path / "nope")

    def test_load_descriptions_directory_source(self, descriptions_dir):
        config = Config(
            services=["ec2"],
            descriptions={"source": "directory", "path": str(descriptions_dir)},
        )
        descriptions = load_descriptions(config)
        assert len(descriptions) == 2


class TestLoadFromBotocore:
    """Tests for loading bundled botocore models."""

    @pytest.fixture
    def loader(self, ec2_document):
        sagemaker = json.loads(json.dumps(ec2_document))
        sagemaker["metadata"] = {
            "serviceId": "SageMaker Runtime",
            "endpointPrefix": "runtime.sagemaker",
            "apiVersion": "2017-05-13",
        }
        models = {"ec2": ec2_document, "sagemaker-runtime": sagemaker}

        loader = MagicMock()
        loader.list_available_services.return_value = sorted(models)
        loader.list_api_versions.side_effect = (
            lambda name, type_name: [models[name]["metadata"]["apiVersion"]]
        )
        loader.load_service_model.side_effect = (
            lambda name, type_name, api_version=None: models[name]
        )
        return loader

    def test_loads_all(self, loader):
        with patch("botocore.loaders.create_loader", return_value=loader):
            descriptions = load_botocore_descriptions()

        assert {d.endpoint_namespace for d in descriptions} == {"ec2", "runtime.sagemaker"}
        ec2 = next(d for d in descriptions if d.endpoint_namespace == "ec2")
        assert ec2.client_name == "ec2"
        assert ec2.source == "botocore:ec2/2016-11-15"

    def test_matching_name_skips_scan(self, loader):
        with patch("botocore.loaders.create_loader", return_value=loader):
            descriptions = load_botocore_descriptions(["ec2"])

        assert [d.endpoint_namespace for d in descriptions] == ["ec2"]
        loaded = [c.args[0] for c in loader.load_service_model.call_args_list]
        assert loaded == ["ec2"]

    def test_scans_for_prefix_mismatch(self, loader):
        with patch("botocore.loaders.create_loader", return_value=loader):
            descriptions = load_botocore_descriptions(["runtime.sagemaker"])

        assert [d.endpoint_namespace for d in descriptions] == ["runtime.sagemaker"]
        assert descriptions[0].client_name == "sagemaker-runtime"


class TestVersionOrdering:
    """Tests for API version comparison."""

    def test_date_versions(self):
        assert version_key("2016-11-15") == (2016, 11, 15)
        assert is_newer_version("2017-01-01", "2016-11-15")
        assert not is_newer_version("2016-11-15", "2017-01-01")

    def test_numeric_not_lexicographic(self):
        assert is_newer_version("2016-11-15", "2016-9-01")

    def test_equal_is_not_newer(self):
        assert not is_newer_version("2016-11-15", "2016-11-15")

    def test_incomparable_is_not_newer(self):
        assert not is_newer_version("beta", "2016-11-15")


class TestSelectDescriptions:
    """Tests for the allow-list and version policy."""

    def test_newest_version_wins(self, make_s3_document):
        old = ServiceAPIDescription.from_document(make_s3_document("2006-03-01", "ListBuckets"))
        new = ServiceAPIDescription.from_document(make_s3_document("2017-01-01", "ListBucketsV2"))

        for ordering in ([old, new], [new, old]):
            (selected,) = select_descriptions(ordering, ["s3"])
            assert selected is new

    def test_tie_keeps_first(self, make_s3_document):
        first = ServiceAPIDescription.from_document(make_s3_document("2006-03-01", "A"))
        second = ServiceAPIDescription.from_document(make_s3_document("2006-03-01", "B"))
        (selected,) = select_descriptions([first, second], ["s3"])
        assert selected is first

    def test_filters_to_allow_list(self, ec2_description, make_s3_document):
        s3 = ServiceAPIDescription.from_document(make_s3_document("2006-03-01", "ListBuckets"))
        assert select_descriptions([ec2_description, s3], ["s3"]) == [s3]

    def test_empty_allow_list(self, ec2_description):
        assert select_descriptions([ec2_description], []) == []

    def test_order_of_first_appearance(self, ec2_description, make_s3_document):
        s3 = ServiceAPIDescription.from_document(make_s3_document("2006-03-01", "ListBuckets"))
        selected = select_descriptions([s3, ec2_description], ["ec2", "s3"])
        assert [d.endpoint_namespace for d in selected] == ["s3", "ec2"]
