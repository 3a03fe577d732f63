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

"""Tests for the Controller route registry."""

import pytest

from genro_controllers import ConfigurationError, Controller, HttpMethod, NotFound


def handler(ctx):
    return "ok"


def h1(ctx, services):
    pass


def h2(ctx, services):
    pass


def h3(ctx, services):
    pass


def _controller(prefix=None):
    controller = Controller(prefix)
    controller.add_route("list", "GET", "/items", handler)
    controller.add_route("create", HttpMethod.POST, "/items", handler, success_status=201)
    return controller


class TestRoutes:
    def test_add_route_without_prefix_normalizes_path(self):
        controller = Controller()
        controller.add_route("r", "GET", "//foo///bar", handler)
        assert controller.get_route("r").path == "/foo/bar"

    @pytest.mark.parametrize(
        "prefix, path, expected",
        [
            ("/api", "/users", "/api/users"),
            ("/api/", "/users", "/api/users"),
            ("/api//", "//users/", "/api/users/"),
            ("", "/users", "/users"),
        ],
    )
    def test_add_route_merges_prefix(self, prefix, path, expected):
        controller = Controller(prefix)
        controller.add_route("r", "GET", path, handler)
        assert controller.get_route("r").path == expected

    def test_route_fields(self):
        route = _controller().get_route("create")
        assert route.name == "create"
        assert route.http_method is HttpMethod.POST
        assert route.handler is handler
        assert route.pre_hooks == []
        assert route.post_hooks == []
        assert route.success_status == 201

    def test_http_method_string_is_case_insensitive(self):
        controller = Controller()
        controller.add_route("r", "patch", "/", handler)
        assert controller.get_route("r").http_method is HttpMethod.PATCH

    def test_unknown_http_method_is_rejected(self):
        with pytest.raises(ValueError, match="Unknown HTTP method"):
            Controller().add_route("r", "FETCH", "/", handler)

    def test_get_route_unknown_name_raises(self):
        with pytest.raises(NotFound) as excinfo:
            _controller().get_route("missing")
        assert str(excinfo.value) == "No route called `missing` could be found."
        assert excinfo.value.name == "missing"
        assert isinstance(excinfo.value, ConfigurationError)

    def test_same_name_replaces_and_keeps_order(self):
        controller = Controller()
        controller.add_route("a", "GET", "/a", handler)
        controller.add_route("b", "GET", "/b", handler)
        controller.add_route("c", "GET", "/c", handler)
        controller.add_route("b", "DELETE", "/b2", handler)
        routes = controller.get_routes()
        assert [r.name for r in routes] == ["a", "b", "c"]
        assert controller.get_route("b").path == "/b2"
        assert controller.get_route("b").http_method is HttpMethod.DELETE
        assert len(controller) == 3

    def test_get_routes_is_a_snapshot(self):
        controller = _controller()
        routes = controller.get_routes()
        routes.clear()
        assert len(controller.get_routes()) == 2
        assert "list" in controller


class TestHooks:
    def test_pre_hooks_at_the_top(self):
        controller = _controller().with_pre_hook(h3)
        controller.add_pre_hooks_at_the_top([h1, h2])
        for route in controller.get_routes():
            assert route.pre_hooks == [h1, h2, h3]

    def test_post_hooks_at_the_bottom(self):
        controller = _controller().with_post_hook(h3)
        controller.add_post_hooks_at_the_bottom([h1, h2])
        for route in controller.get_routes():
            assert route.post_hooks == [h3, h1, h2]

    def test_broadcast_appenders_return_self(self):
        controller = _controller()
        result = controller.with_pre_hook(h1).with_pre_hooks([h2, h3]).with_post_hook(h1)
        assert result is controller
        for route in controller.get_routes():
            assert route.pre_hooks == [h1, h2, h3]
            assert route.post_hooks == [h1]

    def test_targeted_appenders_only_touch_named_routes(self):
        controller = _controller()
        controller.with_pre_hook(h1, "create").with_post_hooks([h2, h3], "list")
        assert controller.get_route("create").pre_hooks == [h1]
        assert controller.get_route("create").post_hooks == []
        assert controller.get_route("list").pre_hooks == []
        assert controller.get_route("list").post_hooks == [h2, h3]

    def test_targeted_appender_with_unknown_name_changes_nothing(self):
        controller = _controller()
        with pytest.raises(NotFound):
            controller.with_pre_hooks([h1], "list", "missing")
        assert controller.get_route("list").pre_hooks == []

    def test_hooks_are_independent_per_route(self):
        controller = _controller()
        controller.add_pre_hooks_at_the_top([h1])
        controller.get_route("list").pre_hooks.append(h2)
        assert controller.get_route("create").pre_hooks == [h1]

    def test_no_symmetric_nesting_primitives(self):
        controller = Controller()
        assert not hasattr(controller, "add_pre_hooks_at_the_bottom")
        assert not hasattr(controller, "add_post_hooks_at_the_top")


class TestNesting:
    def test_add_path_at_the_beginning(self):
        controller = _controller("/items")
        controller.add_path_at_the_beginning("/api/")
        assert [r.path for r in controller.get_routes()] == ["/api/items/items"] * 2

    def test_nested_composition(self):
        inner = Controller("/users")
        inner.add_route("get", "GET", "/{id}", handler)
        inner.with_pre_hook(h3)
        inner.with_post_hook(h3)

        inner.add_path_at_the_beginning("/v1")
        inner.add_pre_hooks_at_the_top([h1])
        inner.add_post_hooks_at_the_bottom([h2])

        route = inner.get_route("get")
        assert route.path == "/v1/users/{id}"
        assert route.pre_hooks == [h1, h3]
        assert route.post_hooks == [h3, h2]
