# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Collapsing types that were extracted more than once under the same name."""

import logging
from typing import Iterable, Optional

from shapeql.core.errors import DuplicateTypeConflictError
from shapeql.core.models import ExtractedType, TypeConflict

logger = logging.getLogger(__name__)


def dedupe_types(
    types: Iterable[ExtractedType],
    conflicts: Optional[list[TypeConflict]] = None,
    strict: bool = False,
) -> list[ExtractedType]:
    """Keep exactly one type per name, first occurrence wins, order preserved.

    A later type with the same name but a different structure is dropped,
    logged, and recorded in ``conflicts`` (one entry per distinct dropped
    structure). With ``strict=True`` the first such conflict raises
    DuplicateTypeConflictError instead.
    """
    kept: dict[str, ExtractedType] = {}
    reported: set[tuple[str, tuple]] = set()

    for extracted in types:
        existing = kept.get(extracted.name)
        if existing is None:
            kept[extracted.name] = extracted
            continue

        if existing.signature() == extracted.signature():
            continue

        report_key = (extracted.name, extracted.signature())
        if report_key in reported:
            continue
        reported.add(report_key)

        conflict = TypeConflict(
            name=extracted.name,
            kept_fields=existing.field_names(),
            other_fields=extracted.field_names(),
        )
        if strict:
            raise DuplicateTypeConflictError(conflict)

        logger.warning(
            f"Type '{conflict.name}' generated with different fields; "
            f"keeping {list(conflict.kept_fields)}, dropping {list(conflict.other_fields)}"
        )
        if conflicts is not None:
            conflicts.append(conflict)

    return list(kept.values())
