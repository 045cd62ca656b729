import httpx
import pytest
import respx
from httpx import Response
from rest_navigator.core.endpoint import Endpoint, EndpointConfig, ensure_trailing_slash
from rest_navigator.core.errors import (
    ConflictError,
    EndpointConfigError,
    HttpError,
    LinkParseError,
    NotFoundError,
)
from rest_navigator.core.http import HttpMethod
from rest_navigator.core.links import Link
from rest_navigator.endpoints.entry import EntryEndpoint

URI = "http://localhost/endpoint"


@pytest.fixture
def endpoint(entry):
    return Endpoint(entry, "endpoint")


def test_entry_uri_gets_trailing_slash():
    entry = EntryEndpoint("http://localhost/api")
    assert entry.uri == "http://localhost/api/"
    assert Endpoint(entry, "sub").uri == "http://localhost/api/sub"


def test_entry_uri_must_be_absolute():
    with pytest.raises(EndpointConfigError):
        EntryEndpoint("relative/path")


def test_config_required_without_referrer():
    with pytest.raises(EndpointConfigError):
        Endpoint(None, "http://localhost/")


@pytest.mark.asyncio
async def test_config_rejected_with_referrer(entry):
    with pytest.raises(EndpointConfigError):
        Endpoint(entry, "endpoint", config=entry.config)


@pytest.mark.asyncio
async def test_config_missing_collaborator(entry):
    config = EndpointConfig(
        transport=entry.transport,
        serializer=entry.serializer,
        error_policy=None,
        link_extractor=entry.link_extractor,
    )
    with pytest.raises(EndpointConfigError) as exc:
        Endpoint(None, "http://localhost/", config=config)
    assert "error_policy" in str(exc.value)


@pytest.mark.asyncio
async def test_child_inherits_config(entry, endpoint):
    assert endpoint.config is entry.config
    assert endpoint.transport is entry.transport


@pytest.mark.asyncio
async def test_resolve_with_implied_trailing_slash(endpoint):
    assert endpoint.resolve("./sub") == "http://localhost/endpoint/sub"
    assert endpoint.resolve("sub") == "http://localhost/sub"
    assert endpoint.resolve("http://other/x") == "http://other/x"


@pytest.mark.parametrize(
    "uri, expected",
    [
        ("http://h/a", "http://h/a/"),
        ("http://h/a/", "http://h/a/"),
        ("http://h", "http://h/"),
        ("http://h/a?q=1", "http://h/a/?q=1"),
        ("http://h/a#frag", "http://h/a/#frag"),
    ],
)
def test_ensure_trailing_slash(uri, expected):
    assert ensure_trailing_slash(uri) == expected


@pytest.mark.asyncio
async def test_resolve_implied_slash_with_query(entry):
    endpoint = Endpoint(entry, "endpoint?page=2")
    assert endpoint.resolve("./sub") == "http://localhost/endpoint/sub"


@pytest.mark.asyncio
async def test_accept_header(endpoint):
    async with respx.mock:
        route = respx.get(URI).mock(return_value=Response(200))
        await endpoint.send(HttpMethod.GET)

    assert route.calls[0].request.headers["Accept"] == "application/json"


@pytest.mark.asyncio
async def test_allowed_methods(endpoint):
    assert endpoint.allowed_methods is None
    assert endpoint.is_method_allowed("PUT") is None

    async with respx.mock:
        respx.get(URI).mock(return_value=Response(200, headers={"Allow": "PUT, post"}))
        await endpoint.send(HttpMethod.GET)

    assert endpoint.allowed_methods == frozenset({"PUT", "POST"})
    assert endpoint.is_method_allowed("put") is True
    assert endpoint.is_method_allowed("DELETE") is False


@pytest.mark.asyncio
async def test_allowed_methods_kept_without_allow_header(endpoint):
    async with respx.mock:
        respx.get(URI).mock(
            side_effect=[Response(200, headers={"Allow": "GET"}), Response(200)]
        )
        await endpoint.send(HttpMethod.GET)
        await endpoint.send(HttpMethod.GET)

    assert endpoint.allowed_methods == frozenset({"GET"})


@pytest.mark.asyncio
async def test_header_links(endpoint):
    async with respx.mock:
        respx.get(URI).mock(
            return_value=Response(
                200,
                headers=[
                    ("Link", "<a>; rel=target1, <b>; rel=target2"),
                    ("Link", "<c>; rel=target3"),
                ],
            )
        )
        await endpoint.send(HttpMethod.GET)

    assert endpoint.link("target1") == "http://localhost/a"
    assert endpoint.link("target2") == "http://localhost/b"
    assert endpoint.link("target3") == "http://localhost/c"


@pytest.mark.asyncio
async def test_header_links_absolute(endpoint):
    async with respx.mock:
        respx.get(URI).mock(
            return_value=Response(200, headers={"Link": "<http://remote/b>; rel=target"})
        )
        await endpoint.send(HttpMethod.GET)

    assert endpoint.link("target") == "http://remote/b"


@pytest.mark.asyncio
async def test_get_links_with_titles(endpoint):
    async with respx.mock:
        respx.get(URI).mock(
            return_value=Response(
                200,
                headers={
                    "Link": '<target1>; rel=child; title="Title 1", <target2>; rel=child'
                },
            )
        )
        await endpoint.send(HttpMethod.GET)

    assert endpoint.get_links("child") == [
        Link(rel="child", href="http://localhost/target1", title="Title 1"),
        Link(rel="child", href="http://localhost/target2"),
    ]
    assert endpoint.get_links("other") == []


@pytest.mark.asyncio
async def test_link_with_quoted_separators(endpoint):
    async with respx.mock:
        respx.get(URI).mock(
            return_value=Response(
                200,
                headers={"Link": '<a>; rel=target1; title="Title,= 1", <b>; rel=target2'},
            )
        )
        await endpoint.send(HttpMethod.GET)

    assert endpoint.get_links("target1")[0].title == "Title,= 1"
    assert endpoint.link("target2") == "http://localhost/b"


@pytest.mark.asyncio
async def test_link_not_found(endpoint):
    async with respx.mock:
        respx.get(URI).mock(return_value=Response(200))
        await endpoint.send(HttpMethod.GET)

    with pytest.raises(NotFoundError) as exc:
        endpoint.link("missing")
    assert exc.value.status_code == 0
    assert "missing" in str(exc.value)


@pytest.mark.asyncio
async def test_hal_links(endpoint):
    body = {
        "_links": {
            "single": {"href": "a"},
            "collection": [{"href": "b", "title": "Title 1"}, {"href": "c"}],
            "template": {"href": "{id}", "templated": True},
        }
    }
    async with respx.mock:
        respx.get(URI).mock(
            return_value=Response(
                200, json=body, headers={"Content-Type": "application/hal+json"}
            )
        )
        await endpoint.send(HttpMethod.GET)

    assert endpoint.link("single") == "http://localhost/a"
    assert [link.href for link in endpoint.get_links("collection")] == [
        "http://localhost/b",
        "http://localhost/c",
    ]
    assert endpoint.get_links("collection")[0].title == "Title 1"
    assert endpoint.link_template("template", {"id": "1"}) == "http://localhost/1"


@pytest.mark.asyncio
async def test_hal_single_and_array_are_equivalent(endpoint):
    async with respx.mock:
        respx.get(URI).mock(
            side_effect=[
                Response(
                    200,
                    json={"_links": {"single": {"href": "a"}}},
                    headers={"Content-Type": "application/hal+json"},
                ),
                Response(
                    200,
                    json={"_links": {"single": [{"href": "a"}]}},
                    headers={"Content-Type": "application/hal+json"},
                ),
            ]
        )
        await endpoint.send(HttpMethod.GET)
        first = endpoint.get_links("single")
        await endpoint.send(HttpMethod.GET)
        second = endpoint.get_links("single")

    assert first == second


@pytest.mark.asyncio
async def test_links_replaced_by_each_response(endpoint):
    async with respx.mock:
        respx.get(URI).mock(
            side_effect=[
                Response(200, headers={"Link": "<a>; rel=first"}),
                Response(200, headers={"Link": "<b>; rel=second"}),
            ]
        )
        await endpoint.send(HttpMethod.GET)
        await endpoint.send(HttpMethod.GET)

    assert endpoint.get_links("first") == []
    assert endpoint.link("second") == "http://localhost/b"


@pytest.mark.asyncio
async def test_link_templates(endpoint):
    async with respx.mock:
        respx.get(URI).mock(
            return_value=Response(
                200,
                headers={"Link": "<a{?x}>; rel=search; templated=true, <b>; rel=search"},
            )
        )
        await endpoint.send(HttpMethod.GET)

    assert endpoint.get_link_template("search") == "a{?x}"
    assert endpoint.link_template("search", {"x": 1}) == "http://localhost/a?x=1"
    assert endpoint.link("search") == "http://localhost/b"


@pytest.mark.asyncio
async def test_link_template_not_found(endpoint):
    with pytest.raises(NotFoundError) as exc:
        endpoint.get_link_template("missing")
    assert exc.value.status_code == 0


@pytest.mark.asyncio
async def test_default_link_used_as_fallback(endpoint):
    endpoint.set_default_link("fallback", "a")
    endpoint.set_default_link("override", "x")
    assert endpoint.link("fallback") == "http://localhost/a"

    async with respx.mock:
        respx.get(URI).mock(return_value=Response(200, headers={"Link": "<b>; rel=override"}))
        await endpoint.send(HttpMethod.GET)

    assert endpoint.link("fallback") == "http://localhost/a"
    assert endpoint.link("override") == "http://localhost/b"


@pytest.mark.asyncio
async def test_default_link_removed(endpoint):
    endpoint.set_default_link("fallback", "a")
    endpoint.set_default_link("fallback", None)
    with pytest.raises(NotFoundError):
        endpoint.link("fallback")


@pytest.mark.asyncio
async def test_default_link_template(endpoint):
    endpoint.set_default_link_template("child", "./{id}")
    assert endpoint.link_template("child", {"id": "x"}) == "http://localhost/endpoint/x"


@pytest.mark.asyncio
async def test_default_link_template_validated(endpoint):
    with pytest.raises(ValueError):
        endpoint.set_default_link_template("child", "{broken")


@pytest.mark.asyncio
async def test_defaults_sealed_after_first_response(endpoint):
    async with respx.mock:
        respx.get(URI).mock(return_value=Response(200))
        await endpoint.send(HttpMethod.GET)

    with pytest.raises(EndpointConfigError):
        endpoint.set_default_link("late", "a")
    with pytest.raises(EndpointConfigError):
        endpoint.set_default_link_template("late", "{id}")


@pytest.mark.asyncio
async def test_error_with_json_message(endpoint):
    async with respx.mock:
        respx.get(URI).mock(return_value=Response(409, json={"message": "my message"}))
        with pytest.raises(ConflictError) as exc:
            await endpoint.send(HttpMethod.GET)

    assert str(exc.value) == "my message"
    assert exc.value.status_code == 409
    assert exc.value.data == {"message": "my message"}
    assert exc.value.method == "GET"
    assert exc.value.uri == URI


@pytest.mark.asyncio
async def test_error_with_json_array(endpoint):
    async with respx.mock:
        respx.get(URI).mock(return_value=Response(409, json=[{"message": "my message"}]))
        with pytest.raises(ConflictError) as exc:
            await endpoint.send(HttpMethod.GET)

    assert exc.value.data == [{"message": "my message"}]
    assert str(exc.value) == "HTTP 409 Conflict"


@pytest.mark.asyncio
async def test_error_with_unknown_content_type(endpoint):
    async with respx.mock:
        respx.get(URI).mock(
            return_value=Response(
                409, content=b"<error/>", headers={"Content-Type": "application/xml"}
            )
        )
        with pytest.raises(ConflictError) as exc:
            await endpoint.send(HttpMethod.GET)

    assert exc.value.data is None


@pytest.mark.asyncio
async def test_unmapped_status_raises_http_error(endpoint):
    async with respx.mock:
        respx.get(URI).mock(return_value=Response(500))
        with pytest.raises(HttpError) as exc:
            await endpoint.send(HttpMethod.GET)

    assert type(exc.value) is HttpError
    assert exc.value.status_code == 500


@pytest.mark.asyncio
async def test_links_cached_even_for_error_responses(endpoint):
    async with respx.mock:
        respx.get(URI).mock(
            return_value=Response(409, headers={"Link": "<help>; rel=help"})
        )
        with pytest.raises(ConflictError):
            await endpoint.send(HttpMethod.GET)

    assert endpoint.link("help") == "http://localhost/help"


@pytest.mark.asyncio
async def test_malformed_link_header_propagates(endpoint):
    async with respx.mock:
        respx.get(URI).mock(return_value=Response(200, headers={"Link": "<a>"}))
        with pytest.raises(LinkParseError):
            await endpoint.send(HttpMethod.GET)


@pytest.mark.asyncio
async def test_read_meta(entry):
    async with respx.mock:
        route = respx.get("http://localhost/").mock(
            return_value=Response(200, headers={"Link": "<users/>; rel=users"})
        )
        await entry.read_meta()

    assert route.called
    assert entry.link("users") == "http://localhost/users/"


@pytest.mark.asyncio
async def test_entry_uses_supplied_client():
    from rest_navigator.transports.http import HttpxTransport

    async with httpx.AsyncClient() as http:
        transport = HttpxTransport(http=http)
        async with EntryEndpoint("http://localhost/", transport=transport) as entry:
            assert entry.transport is transport
        assert not http.is_closed
