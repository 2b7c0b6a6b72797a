import json
from dataclasses import replace
from typing import Any

import pytest
from jinja2 import FunctionLoader

from action_client import (
    ActionClient,
    ConfigurationError,
    JinjaTemplateResolver,
    RequestSpec,
    StubAdapter,
    action,
)


class TestRequests:
    def test_post_with_json_body_from_instance_state(
        self,
        base_client: type[ActionClient],
        templates: dict[str, str],
        article: Any,
    ) -> None:
        class ArticleClient(base_client):
            @action
            def create(self, article):
                self.article = article

                return self.post(path="/articles")

        templates["article_client/create.json.j2"] = (
            '{{ {"title": article.title} | tojson }}'
        )

        request = ArticleClient.create(article=article)

        assert request.method == "POST"
        assert request.original_url == "https://example.com/articles"
        assert json.loads(request.body) == {"title": "Article Title"}
        assert request.headers["Content-Type"] == "application/json"

    @pytest.mark.parametrize(
        "verb, method",
        [
            ("get", "GET"),
            ("options", "OPTIONS"),
            ("head", "HEAD"),
            ("trace", "TRACE"),
        ],
    )
    def test_bodyless_request_without_template(
        self, base_client: type[ActionClient], verb: str, method: str
    ) -> None:
        class ArticleClient(base_client):
            @action
            def status(self):
                return getattr(self, verb)(path="/status")

        request = ArticleClient.status()

        assert request.method == method
        assert request.uri == "https://example.com/status"
        assert request.body == b""
        assert "Content-Type" not in request.headers

    def test_get_without_template_uses_default_content_type(
        self, base_client: type[ActionClient]
    ) -> None:
        class ArticleClient(base_client):
            @action
            def all(self):
                return self.get(path="/articles")

        ArticleClient.default(headers={"Content-Type": "application/json"})

        request = ArticleClient.all()

        assert request.method == "GET"
        assert request.uri == "https://example.com/articles"
        assert request.body == b""
        assert request.headers["Content-Type"] == "application/json"

    def test_delete_without_template(
        self, base_client: type[ActionClient], article: Any
    ) -> None:
        class ArticleClient(base_client):
            @action
            def destroy(self, article):
                return self.delete(path=f"/articles/{article.id}")

        ArticleClient.default(headers={"Content-Type": "application/json"})

        request = ArticleClient.destroy(article=article)

        assert request.method == "DELETE"
        assert request.uri == "https://example.com/articles/1"
        assert request.body == b""
        assert request.headers == {"Content-Type": "application/json"}

    def test_delete_with_plain_json_template(
        self,
        base_client: type[ActionClient],
        templates: dict[str, str],
        article: Any,
    ) -> None:
        class ArticleClient(base_client):
            @action
            def destroy(self, article):
                return self.delete(path=f"/articles/{article.id}")

        templates["article_client/destroy.json"] = '{"confirm": true}\n'

        request = ArticleClient.destroy(article=article)

        assert request.method == "DELETE"
        assert request.uri == "https://example.com/articles/1"
        assert json.loads(request.body) == {"confirm": True}
        assert request.headers["Content-Type"] == "application/json"

    def test_put_with_json_body_from_locals(
        self,
        base_client: type[ActionClient],
        templates: dict[str, str],
        article: Any,
    ) -> None:
        class ArticleClient(base_client):
            @action
            def update(self, article):
                return self.put(
                    path=f"/articles/{article.id}", locals={"article": article}
                )

        templates["article_client/update.json.j2"] = (
            '{{ {"title": article.title} | tojson }}'
        )

        request = ArticleClient.update(article=article)

        assert request.method == "PUT"
        assert request.uri == "https://example.com/articles/1"
        assert json.loads(request.body) == {"title": "Article Title"}
        assert request.headers["Content-Type"] == "application/json"

    def test_patch_with_xml_body_from_locals(
        self,
        base_client: type[ActionClient],
        templates: dict[str, str],
        article: Any,
    ) -> None:
        class ArticleClient(base_client):
            @action
            def update(self, article):
                return self.patch(
                    path=f"/articles/{article.id}", locals={"article": article}
                )

        templates["article_client/update.xml.j2"] = "<xml>{{ article.title }}</xml>\n"

        request = ArticleClient.update(article=article)

        assert request.method == "PATCH"
        assert request.uri == "https://example.com/articles/1"
        assert request.text.strip() == "<xml>Article Title</xml>"
        assert request.headers["Content-Type"] == "application/xml"

    def test_body_wrapped_by_layout(
        self,
        base_client: type[ActionClient],
        templates: dict[str, str],
        article: Any,
    ) -> None:
        class ArticleClient(base_client):
            @action
            def create(self, article):
                return self.post(
                    layout="article_client",
                    locals={"article": article},
                    url="https://example.com/special/articles",
                )

        templates["layouts/article_client.json.j2"] = '{ "response": {{ content }} }'
        templates["article_client/create.json.j2"] = (
            '{ "title": "{{ article.title }}" }'
        )

        request = ArticleClient.create(article=replace(article, title="From Layout"))

        assert json.loads(request.body) == {"response": {"title": "From Layout"}}

    def test_full_url_passed_as_option(self, base_client: type[ActionClient]) -> None:
        class ArticleClient(base_client):
            @action
            def create(self, article):
                return self.post(url="https://example.com/special/articles")

        request = ArticleClient.create(article=None)

        assert request.uri == "https://example.com/special/articles"

    def test_additional_headers(self, base_client: type[ActionClient]) -> None:
        class ArticleClient(base_client):
            @action
            def create(self, article):
                return self.post(path="/articles", headers={"X-My-Header": "hello!"})

        ArticleClient.default(headers={"Content-Type": "application/json"})

        request = ArticleClient.create(article=None)

        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["X-My-Header"] == "hello!"

    def test_overridden_headers(self, base_client: type[ActionClient]) -> None:
        class ArticleClient(base_client):
            @action
            def create(self, article):
                return self.post(
                    path="/articles", headers={"content-type": "application/xml"}
                )

        ArticleClient.default(headers={"Content-Type": "application/json"})

        request = ArticleClient.create(article=None)

        assert request.headers["Content-Type"] == "application/xml"
        assert list(request.headers) == ["content-type"]

    def test_class_default_header_wins_over_template_content_type(
        self, base_client: type[ActionClient], templates: dict[str, str]
    ) -> None:
        class ArticleClient(base_client):
            @action
            def create(self):
                return self.post(path="/articles")

        ArticleClient.default(headers={"Content-Type": "application/vnd.api+json"})
        templates["article_client/create.json.j2"] = "{}"

        request = ArticleClient.create()

        assert request.headers["Content-Type"] == "application/vnd.api+json"

    def test_format_override_selects_template_and_content_type(
        self, base_client: type[ActionClient], templates: dict[str, str]
    ) -> None:
        class ArticleClient(base_client):
            @action
            def create(self, format):
                return self.post(path="/articles", format=format)

        templates["article_client/create.json.j2"] = '{"kind": "json"}'
        templates["article_client/create.xml.j2"] = "<kind>xml</kind>"

        json_request = ArticleClient.create(format="json")
        xml_request = ArticleClient.create(format="xml")

        assert json_request.headers["Content-Type"] == "application/json"
        assert xml_request.text == "<kind>xml</kind>"
        assert xml_request.headers["Content-Type"] == "application/xml"

    def test_undeclared_template_format_defaults_to_json(
        self, base_client: type[ActionClient], templates: dict[str, str]
    ) -> None:
        class ArticleClient(base_client):
            @action
            def ping(self):
                return self.post(path="/ping")

        templates["article_client/ping.j2"] = '{"ping": true}'

        request = ArticleClient.ping()

        assert request.headers["Content-Type"] == "application/json"

    def test_both_url_and_path_raise_configuration_error(
        self,
        base_client: type[ActionClient],
        templates: dict[str, str],
        stub_adapter: StubAdapter,
    ) -> None:
        class ArticleClient(base_client):
            @action
            def create(self, article):
                return self.post(url="ignored", path="ignored")

        # would fail to render if rendering ran first
        templates["article_client/create.json.j2"] = "{{ missing.attribute }}"

        with pytest.raises(ConfigurationError):
            ArticleClient.create(article=None)

        assert stub_adapter.requests == []

    def test_configuration_error_is_a_value_error(
        self, base_client: type[ActionClient]
    ) -> None:
        class ArticleClient(base_client):
            @action
            def create(self):
                return self.post(url="https://example.com/a", path="/a")

        with pytest.raises(ValueError):
            ArticleClient.create()

    def test_templates_from_a_function_loader(self, article: Any) -> None:
        sources = {"article_client/create.json.j2": '{"title": "{{ title }}"}'}

        class ArticleClient(ActionClient):
            @action
            def create(self, article):
                return self.post(path="/articles", locals={"title": article.title})

        ArticleClient.default(
            url="https://example.com",
            template_resolver=JinjaTemplateResolver(FunctionLoader(sources.get)),
        )

        assert json.loads(ArticleClient.create(article=article).body) == {
            "title": "Article Title"
        }

    def test_building_is_idempotent(
        self,
        base_client: type[ActionClient],
        templates: dict[str, str],
        article: Any,
    ) -> None:
        class ArticleClient(base_client):
            @action
            def create(self, article):
                return self.post(
                    path="/articles",
                    headers={"X-Request": "same"},
                    locals={"article": article},
                )

        templates["article_client/create.json.j2"] = (
            '{{ {"title": article.title} | tojson }}'
        )

        first = ArticleClient.create(article=article)
        second = ArticleClient.create(article=article)

        assert first == second
        assert first.headers == second.headers
        assert first.body == second.body


class TestUrls:
    @pytest.mark.parametrize(
        "base, path, expected",
        [
            ("https://example.com", "/articles", "https://example.com/articles"),
            ("https://example.com/", "/articles", "https://example.com/articles"),
            ("https://example.com/", "articles", "https://example.com/articles"),
            ("https://example.com/api", "/articles", "https://example.com/api/articles"),
            ("https://example.com/api/", "articles/1", "https://example.com/api/articles/1"),
        ],
    )
    def test_path_is_joined_to_base_url(
        self, base: str, path: str, expected: str
    ) -> None:
        class ArticleClient(ActionClient):
            @action
            def all(self):
                return self.get(path=path)

        ArticleClient.default(url=base)

        assert ArticleClient.all().uri == expected

    def test_missing_base_url_raises(self) -> None:
        class ArticleClient(ActionClient):
            @action
            def all(self):
                return self.get(path="/articles")

        with pytest.raises(ConfigurationError, match="article_client"):
            ArticleClient.all()

    def test_relative_url_option_raises(self) -> None:
        class ArticleClient(ActionClient):
            @action
            def all(self):
                return self.get(url="/articles")

        with pytest.raises(ConfigurationError, match="not absolute"):
            ArticleClient.all()


class TestRequestSpec:
    def test_method_is_uppercased(self) -> None:
        request = RequestSpec(method="post", uri="https://example.com")

        assert request.method == "POST"

    def test_unknown_method_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            RequestSpec(method="FETCH", uri="https://example.com")

    def test_headers_are_frozen(self) -> None:
        request = RequestSpec(
            method="GET", uri="https://example.com", headers={"Accept": "text/plain"}
        )

        with pytest.raises(TypeError):
            request.headers.set("Accept", "application/json")

    def test_replace_keeps_submitter(self) -> None:
        def submitter(request):
            return request

        request = RequestSpec(method="GET", uri="https://example.com", submitter=submitter)

        assert request.replace(body="x").submitter is submitter
        assert request.replace(body="x").body == b"x"

    def test_submit_without_client_raises(self) -> None:
        request = RequestSpec(method="GET", uri="https://example.com")

        with pytest.raises(ConfigurationError, match="not bound"):
            request.submit()
