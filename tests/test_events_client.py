import pytest

from conftest import BASE_URL, FetchSpy, UrlSpy, ValidateSpy
from core.domain.models import FetchOptions, RequestOptions
from core.errors import HttpError, ValidationError
from core.services.events import EventsClient, build_query_parameters


def _only_call(spy):
    assert len(spy.calls) == 1
    return spy.calls[0]


@pytest.mark.asyncio
@pytest.mark.parametrize('call', [
    lambda c: c.list({}),
    lambda c: c.list({'token': ''}),
    lambda c: c.get_by_device('dev1', {}),
    lambda c: c.get_by_rule('rule1', {'count': 5}),
    lambda c: c.get_details('dev1', 'rule1', '123', {'pageToken': 'p'}),
])
async def test_missing_token_fails_before_fetch(events_client, fetch_spy, url_spy, call):
    with pytest.raises(ValidationError) as exc:
        await call(events_client)
    assert 'token' in exc.value.missing
    assert fetch_spy.calls == []
    assert url_spy.calls == []


@pytest.mark.asyncio
async def test_list_without_pagination(events_client, url_spy, validate_spy):
    await events_client.list({'token': 't'})
    segments, query = _only_call(url_spy)
    assert segments == ('events', 'v3')
    assert query == {}
    assert url_spy.urls == [f'{BASE_URL}/events/v3/']
    assert validate_spy.calls == [({'token': 't'}, ['token'])]


@pytest.mark.asyncio
async def test_list_forwards_count_and_page_token(events_client, url_spy):
    await events_client.list({'token': 't', 'count': 5, 'pageToken': 'abc'})
    _, query = _only_call(url_spy)
    assert query == {'count': 5, 'pageToken': 'abc'}
    assert url_spy.urls == [f'{BASE_URL}/events/v3/?count=5&pageToken=abc']


@pytest.mark.asyncio
async def test_list_omits_zero_count_and_empty_page_token(events_client, url_spy):
    await events_client.list({'token': 't', 'count': 0, 'pageToken': ''})
    _, query = _only_call(url_spy)
    assert query == {}
    assert 'count' not in url_spy.urls[0]


@pytest.mark.asyncio
async def test_list_accepts_request_options_model(events_client, url_spy):
    await events_client.list(RequestOptions(token='t', page_token='next'))
    _, query = _only_call(url_spy)
    assert query == {'pageToken': 'next'}


@pytest.mark.asyncio
async def test_get_by_device_puts_tracking_id_in_path(events_client, url_spy, validate_spy):
    await events_client.get_by_device('dev1', {'token': 't', 'count': 10})
    segments, query = _only_call(url_spy)
    assert segments == ('events', 'v3', 'dev1')
    assert query == {'count': 10}
    assert 'trackingId' not in query
    assert url_spy.urls == [f'{BASE_URL}/events/v3/dev1/?count=10']
    assert validate_spy.calls == [({'trackingId': 'dev1', 'token': 't'}, ['trackingId', 'token'])]


@pytest.mark.asyncio
async def test_get_by_device_requires_tracking_id(events_client, fetch_spy):
    with pytest.raises(ValidationError) as exc:
        await events_client.get_by_device('', {'token': 't'})
    assert exc.value.missing == ['trackingId']
    assert fetch_spy.calls == []


@pytest.mark.asyncio
async def test_get_by_rule_sends_rule_id_as_query(events_client, url_spy):
    await events_client.get_by_rule('rule1', {'token': 't'})
    segments, query = _only_call(url_spy)
    assert segments == ('events', 'v3')
    assert query == {'ruleId': 'rule1'}
    assert url_spy.urls == [f'{BASE_URL}/events/v3/?ruleId=rule1']


@pytest.mark.asyncio
async def test_get_by_rule_requires_rule_id(events_client, fetch_spy):
    with pytest.raises(ValidationError) as exc:
        await events_client.get_by_rule(None, {'token': 't'})
    assert exc.value.missing == ['ruleId']
    assert fetch_spy.calls == []


@pytest.mark.asyncio
async def test_get_details_sends_identifiers_as_query(events_client, url_spy):
    await events_client.get_details('dev1', 'rule1', '123', {'token': 't', 'count': 2})
    segments, query = _only_call(url_spy)
    assert segments == ('events', 'v3')
    assert query == {'trackingId': 'dev1', 'ruleId': 'rule1', 'timestamp': '123', 'count': 2}
    assert url_spy.urls == [
        f'{BASE_URL}/events/v3/?trackingId=dev1&ruleId=rule1&timestamp=123&count=2'
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize('args, missing', [
    (('', 'rule1', '123'), ['trackingId']),
    (('dev1', '', '123'), ['ruleId']),
    (('dev1', 'rule1', ''), ['timestamp']),
    ((None, None, None), ['trackingId', 'ruleId', 'timestamp']),
])
async def test_get_details_requires_all_identifiers(events_client, fetch_spy, args, missing):
    with pytest.raises(ValidationError) as exc:
        await events_client.get_details(*args, {'token': 't'})
    assert exc.value.missing == missing
    assert fetch_spy.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize('call', [
    lambda c: c.list({'token': 'tok'}),
    lambda c: c.get_by_device('dev1', {'token': 'tok'}),
    lambda c: c.get_by_rule('rule1', {'token': 'tok'}),
    lambda c: c.get_details('dev1', 'rule1', '123', {'token': 'tok'}),
])
async def test_every_request_is_authenticated(events_client, fetch_spy, url_spy, call):
    await call(events_client)
    url, options = _only_call(fetch_spy)
    assert url == url_spy.urls[0]
    assert isinstance(options, FetchOptions)
    assert options.credentials == 'include'
    assert options.headers == {'Authorization': 'Bearer tok'}


@pytest.mark.asyncio
async def test_body_is_returned_unmodified(url_spy, validate_spy):
    body = {'data': [{'trackingId': 'dev1'}], 'pageToken': 'n', 'extra': {'x': 1}}
    client = EventsClient(url_spy, validate_spy, FetchSpy(body=body))
    assert await client.list({'token': 't'}) is body


@pytest.mark.asyncio
async def test_http_error_propagates_unchanged(url_spy, validate_spy):
    error = HttpError('HTTP 404 Not Found', url='u', status=404, body={'code': 404})
    fetch = FetchSpy(error=error)
    client = EventsClient(url_spy, validate_spy, fetch)
    with pytest.raises(HttpError) as exc:
        await client.get_by_device('dev1', {'token': 't'})
    assert exc.value is error
    assert len(fetch.calls) == 1


@pytest.mark.asyncio
async def test_validation_error_from_injected_validator_propagates(url_spy, fetch_spy):
    async def reject(fields, required):
        raise ValidationError(['custom'])

    client = EventsClient(url_spy, reject, fetch_spy)
    with pytest.raises(ValidationError, match='custom'):
        await client.list({'token': 't'})
    assert fetch_spy.calls == []


def test_collaborators_are_exposed_read_only(url_spy, validate_spy, fetch_spy):
    client = EventsClient(url_spy, validate_spy, fetch_spy)
    assert client.url_builder is url_spy
    assert client.validate is validate_spy
    assert client.fetch is fetch_spy
    with pytest.raises(AttributeError):
        client.fetch = FetchSpy()


def test_build_query_parameters_keeps_identifiers_first():
    options = RequestOptions(token='t', count=3, page_token='p')
    query = build_query_parameters(options, ruleId='r')
    assert list(query) == ['ruleId', 'count', 'pageToken']


def test_spies_satisfy_collaborator_protocols():
    from core.interfaces import AuthenticatedFetch, ParameterValidator, UrlBuilder

    assert isinstance(UrlSpy(), UrlBuilder)
    assert isinstance(ValidateSpy(), ParameterValidator)
    assert isinstance(FetchSpy(), AuthenticatedFetch)


@pytest.mark.asyncio
async def test_odd_optional_values_are_forwarded_as_given(events_client, url_spy):
    await events_client.list({'token': 't', 'count': 2.5, 'pageToken': 123})
    _, query = _only_call(url_spy)
    assert query == {'count': 2.5, 'pageToken': 123}
    assert url_spy.urls == [f'{BASE_URL}/events/v3/?count=2.5&pageToken=123']


@pytest.mark.asyncio
async def test_bad_count_without_token_reports_missing_token(events_client, fetch_spy):
    with pytest.raises(ValidationError) as exc:
        await events_client.list({'count': 'abc'})
    assert exc.value.missing == ['token']
    assert fetch_spy.calls == []


@pytest.mark.asyncio
async def test_mistyped_token_raises_package_validation_error(events_client, fetch_spy, validate_spy):
    from pydantic import ValidationError as PydanticValidationError

    with pytest.raises(ValidationError) as exc:
        await events_client.get_by_rule('rule1', {'token': 123})
    assert exc.value.missing == ['token']
    assert 'Invalid parameters: token' in str(exc.value)
    assert isinstance(exc.value.__cause__, PydanticValidationError)
    assert validate_spy.calls == []
    assert fetch_spy.calls == []
