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
"""Shared kernel types for impex errors."""

from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    """Classification of mapping failures.

    Every failure raised while exporting or importing falls into exactly one
    category, which doubles as the default machine-readable error code.
    """

    CONFIGURATION = "CONFIGURATION"
    SCHEMA = "SCHEMA"
    SHAPE = "SHAPE"
    NULL_POLICY = "NULL_POLICY"
    REFERENCE = "REFERENCE"
    UNKNOWN_SHAPE = "UNKNOWN_SHAPE"
