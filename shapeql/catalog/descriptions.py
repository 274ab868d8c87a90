# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Loading service API descriptions and picking one per endpoint namespace.

Two sources are supported:

- a directory of JSON documents (``*.json`` / ``*.min.json``), either in the
  botocore ``<service>/<version>/service-2.json`` layout or flat files;
- the service models bundled with botocore.

Usage:
    from shapeql.catalog.descriptions import load_descriptions_from_dir, select_descriptions

    descriptions = load_descriptions_from_dir("apis/")
    selected = select_descriptions(descriptions, ["ec2", "s3"])
"""

import json
import logging
import re
from pathlib import Path
from typing import Iterable, Optional

from shapeql.core.config import Config
from shapeql.core.errors import DescriptionLoadError
from shapeql.core.models import ServiceAPIDescription

logger = logging.getLogger(__name__)

_VERSION_PART = re.compile(r"\d+|[A-Za-z]+")


def _is_service_document(document) -> bool:
    if not isinstance(document, dict):
        return False
    metadata = document.get("metadata")
    return (
        isinstance(metadata, dict)
        and bool(metadata.get("endpointPrefix"))
        and isinstance(document.get("operations"), dict)
    )


def _client_name_from_path(path: Path) -> Optional[str]:
    """botocore layout: <service>/<api-version>/service-2.json."""
    if path.name.startswith("service-2") and len(path.parents) >= 2:
        return path.parent.parent.name
    return None


def load_description_file(path: str | Path) -> Optional[ServiceAPIDescription]:
    """Load one description document.

    Returns None for JSON documents that are not service descriptions
    (paginators, waiters, examples). Unreadable or malformed JSON raises
    DescriptionLoadError.
    """
    path = Path(path)
    try:
        with open(path) as f:
            document = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DescriptionLoadError(str(path), str(e)) from e

    if not _is_service_document(document):
        logger.debug(f"Skipping {path}: not a service description")
        return None

    return ServiceAPIDescription.from_document(
        document,
        client_name=_client_name_from_path(path),
        source=str(path),
    )


def load_descriptions_from_dir(
    directory: str | Path,
    pattern: str = "**/*.json",
) -> list[ServiceAPIDescription]:
    """Load every service description under a directory, in sorted path order."""
    directory = Path(directory)
    if not directory.is_dir():
        raise DescriptionLoadError(str(directory), "not a directory")

    descriptions = []
    for path in sorted(directory.glob(pattern)):
        if not path.is_file():
            continue
        description = load_description_file(path)
        if description is not None:
            descriptions.append(description)

    logger.info(f"Loaded {len(descriptions)} API descriptions from {directory}")
    return descriptions


def load_botocore_descriptions(namespaces: Optional[Iterable[str]] = None) -> list[ServiceAPIDescription]:
    """Load the service models bundled with botocore, all API versions.

    When ``namespaces`` is given, services whose botocore name matches a
    namespace are loaded first; only namespaces still missing after that
    trigger a scan of the remaining services (botocore names and endpoint
    prefixes differ for a few services, e.g. sagemaker-runtime).
    """
    try:
        from botocore.loaders import create_loader
    except ImportError:
        raise ImportError(
            "Loading bundled service models requires botocore. "
            "Install with: pip install boto3"
        )

    loader = create_loader()
    available = loader.list_available_services("service-2")
    wanted = set(namespaces) if namespaces is not None else None

    def load_service(name: str) -> list[ServiceAPIDescription]:
        loaded = []
        for version in loader.list_api_versions(name, "service-2"):
            model = loader.load_service_model(name, "service-2", api_version=version)
            loaded.append(ServiceAPIDescription.from_document(
                model,
                client_name=name,
                source=f"botocore:{name}/{version}",
            ))
        return loaded

    if wanted is None:
        descriptions = [d for name in available for d in load_service(name)]
    else:
        first_pass = [name for name in available if name in wanted]
        descriptions = [d for name in first_pass for d in load_service(name)]
        missing = wanted - {d.endpoint_namespace for d in descriptions}
        if missing:
            logger.debug(f"Scanning botocore models for namespaces: {sorted(missing)}")
            for name in available:
                if name in first_pass:
                    continue
                descriptions.extend(
                    d for d in load_service(name) if d.endpoint_namespace in missing
                )

    logger.info(f"Loaded {len(descriptions)} API descriptions from botocore")
    return descriptions


def load_descriptions(config: Config) -> list[ServiceAPIDescription]:
    """Load descriptions from the source named in the config."""
    if config.descriptions.source == "directory":
        return load_descriptions_from_dir(config.descriptions_path(), config.descriptions.pattern)
    return load_botocore_descriptions(config.services)


def version_key(version: str) -> tuple:
    """Natural-order key: '2016-11-15' -> (2016, 11, 15), 'v2beta' -> ('v', 2, 'beta')."""
    return tuple(
        int(part) if part.isdigit() else part.lower()
        for part in _VERSION_PART.findall(version or "")
    )


def is_newer_version(candidate: str, current: str) -> bool:
    """True only if ``candidate`` is strictly newer. Incomparable versions are not newer."""
    try:
        return version_key(candidate) > version_key(current)
    except TypeError:
        logger.warning(f"Cannot compare API versions '{candidate}' and '{current}', keeping the first")
        return False


def select_descriptions(
    descriptions: Iterable[ServiceAPIDescription],
    allowed: Iterable[str],
) -> list[ServiceAPIDescription]:
    """Restrict to the allow-list and keep one description per namespace.

    The highest ``api_version`` wins. On a tie or an incomparable pair the
    description encountered first is kept. Output order follows the first
    appearance of each namespace.
    """
    allowed = set(allowed)
    selected: dict[str, ServiceAPIDescription] = {}

    for description in descriptions:
        namespace = description.endpoint_namespace
        if namespace not in allowed:
            continue

        current = selected.get(namespace)
        if current is None:
            selected[namespace] = description
        elif is_newer_version(description.api_version, current.api_version):
            logger.info(
                f"Using {namespace} API version {description.api_version} "
                f"instead of {current.api_version}"
            )
            selected[namespace] = description
        else:
            logger.debug(
                f"Skipping {namespace} API version {description.api_version} "
                f"(keeping {current.api_version})"
            )

    return list(selected.values())
