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
"""Tests for the impex.* configuration properties."""

import pytest

from impex.config.properties import LoggingProperties, MapperProperties
from impex.core.config import Config
from impex.kernel.exceptions import ConfigurationException


class TestMapperProperties:
    def test_bind_defaults(self):
        props = Config({"impex": {"mapper": {}}}).bind(MapperProperties)
        assert props.identity_field == "id"

    def test_bind_custom_identity_field(self):
        props = Config({"impex": {"mapper": {"identity_field": "uuid"}}}).bind(MapperProperties)
        assert props.identity_field == "uuid"

    def test_empty_identity_field_is_rejected(self):
        with pytest.raises(ConfigurationException, match="prefix='impex.mapper'"):
            Config({"impex": {"mapper": {"identity_field": ""}}}).bind(MapperProperties)

    def test_packaged_defaults(self):
        assert Config.defaults().bind(MapperProperties) == MapperProperties()


class TestLoggingProperties:
    def test_bind_defaults(self):
        props = Config({"impex": {"logging": {}}}).bind(LoggingProperties)
        assert props.format == "console"
        assert props.level == {"root": "INFO"}

    def test_bind_json_format(self):
        props = Config({"impex": {"logging": {"format": "json"}}}).bind(LoggingProperties)
        assert props.format == "json"

    def test_bind_module_levels(self):
        config = Config({"impex": {"logging": {"level": {"root": "WARNING", "impex.mapping": "DEBUG"}}}})
        props = config.bind(LoggingProperties)
        assert props.level == {"root": "WARNING", "impex.mapping": "DEBUG"}

    def test_format_from_environment(self, monkeypatch):
        monkeypatch.setenv("IMPEX_LOGGING_FORMAT", "json")
        props = Config.defaults().bind(LoggingProperties)
        assert props.format == "json"
        assert props.level == {"root": "INFO"}
