# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Configuration properties bound from the ``impex.*`` namespace."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, Field

from impex.core.config import config_properties


@config_properties(prefix="impex.mapper")
class MapperProperties(BaseModel):
    """Settings for the mapper (impex.mapper.*).

    ``identity_field`` names the identifier property that identity mapping
    reads from import payloads and from freshly persisted instances.
    """

    identity_field: str = Field(default="id", min_length=1)


@config_properties(prefix="impex.logging")
@dataclass
class LoggingProperties:
    """Configuration for logging (impex.logging.*)."""

    format: str = "console"
    level: dict = field(default_factory=lambda: {"root": "INFO"})
