# Copyright 2025 Softwell S.r.l.
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

"""Shared fixtures."""

import pytest

from genro_controllers import ServiceManager
from genro_controllers.testing import create_empty_context


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def services():
    return ServiceManager()


@pytest.fixture
def ctx():
    return create_empty_context()
