"""
Schema upgrades for module streams.

Only upward moves are possible: a v1 stream becomes a v2 stream with the
same content, its single requirement maps folded into one entry of the v2
dependency list.
"""

from __future__ import annotations

import copy
import dataclasses
import logging

from modulemd_model.errors import UpgradeError
from modulemd_model.models.dependencies import Dependencies
from modulemd_model.models.service_level import ServiceLevel
from modulemd_model.models.stream import ModuleStream
from modulemd_model.models.stream_v1 import ModuleStreamV1
from modulemd_model.models.stream_v2 import ModuleStreamV2

logger = logging.getLogger(__name__)

LATEST_VERSION = 2

# v1 documents carried a single end-of-life date; v2 expresses it as
# the end of this service level.
EOL_SERVICELEVEL = "rawhide"


def _v1_to_v2(stream: ModuleStreamV1) -> ModuleStreamV2:
    upgraded = ModuleStreamV2()
    for f in dataclasses.fields(ModuleStream):
        setattr(upgraded, f.name, copy.deepcopy(getattr(stream, f.name)))

    if stream.buildtime_requirements or stream.runtime_requirements:
        deps = Dependencies()
        for module_name, stream_name in stream.buildtime_requirements.items():
            deps.add_buildtime_stream(module_name, stream_name)
        for module_name, stream_name in stream.runtime_requirements.items():
            deps.add_runtime_stream(module_name, stream_name)
        upgraded.dependencies.append(deps)

    if stream.eol is not None and EOL_SERVICELEVEL not in upgraded.servicelevels:
        upgraded.servicelevels[EOL_SERVICELEVEL] = ServiceLevel(EOL_SERVICELEVEL, stream.eol)

    upgraded.buildopts.rpm_macros = stream.buildopts.rpm_macros
    return upgraded


def upgrade_stream(stream: ModuleStream, target_version: int = LATEST_VERSION) -> ModuleStream:
    """Return a new stream at ``target_version``; the source is left untouched."""
    if target_version not in (1, 2):
        raise UpgradeError(f"Unknown module stream version: {target_version}")
    if target_version < stream.mdversion:
        raise UpgradeError(
            f"Cannot downgrade a v{stream.mdversion} stream to v{target_version}"
        )
    if target_version == stream.mdversion:
        return stream.copy()

    upgraded = _v1_to_v2(stream)
    logger.debug(
        f"[UPGRADE] {stream.nsvca_string() or '<unnamed>'}: v{stream.mdversion} -> v{target_version}"
    )
    return upgraded
