"""
Tests for StubTap matchers, builders and URL utilities

Tests:
- URL normalization and pattern matching
- Stock matchers (everything, uri, http, header, all_of)
- Stock builders (failure, http, text, json)
"""

import json

import pytest

from stubtap.common.url_utils import URLMatcher
from stubtap.stubs import builders, matchers
from stubtap.stubs.models import Content, Failure, NoContent, StreamContent, Success

from conftest import make_request


class TestURLMatcher:
    """Test URLMatcher helpers."""

    def test_normalize_sorts_query(self):
        """Test query parameters are sorted."""
        assert URLMatcher.normalize_url('https://Example.com/a?b=2&a=1#frag') == 'https://example.com/a?a=1&b=2'

    def test_normalize_strip_query(self):
        """Test stripping query parameters."""
        assert URLMatcher.normalize_url('https://example.com/a?b=2', strip_query=True) == 'https://example.com/a'

    @pytest.mark.parametrize('pattern,path,expected', [
        ('/users/{id}', '/users/123', True),
        ('/users/{id}', '/users/123/orders', False),
        ('/users/*', '/users/abc', True),
        ('/users/*', '/users/', False),
        ('/files/**', '/files/a/b/c.txt', True),
        ('/files/**/c.txt', '/files/a/b/c.txt', True),
        ('/v1.0/*', '/v1x0/a', False),
    ])
    def test_path_patterns(self, pattern, path, expected):
        """Test wildcard and named segment patterns."""
        assert URLMatcher.url_matches(f'https://api.example.com{path}', pattern) is expected

    def test_full_url_literal(self):
        """Test literal URLs compare after normalization."""
        assert URLMatcher.url_matches('https://API.example.com/users?b=2&a=1', 'https://api.example.com/users?a=1&b=2')
        assert URLMatcher.url_matches('https://api.example.com/users?a=1', 'https://api.example.com/users')
        assert not URLMatcher.url_matches('https://api.example.com/users', 'https://api.example.com/orders')

    def test_full_url_pattern(self):
        """Test wildcard patterns with a scheme and host."""
        assert URLMatcher.url_matches('https://api.example.com/users/7?x=1', 'https://api.example.com/users/*')
        assert not URLMatcher.url_matches('https://other.example.com/users/7', 'https://api.example.com/users/*')


class TestMatchers:
    """Test stock matchers."""

    def test_everything(self):
        """Test everything accepts any request."""
        assert matchers.everything(make_request('http://anything.test/x', method='DELETE'))

    def test_uri(self):
        """Test uri matcher."""
        matcher = matchers.uri('https://api.example.com/users/{id}')

        assert matcher(make_request('https://api.example.com/users/1'))
        assert not matcher(make_request('https://api.example.com/users'))

    def test_http_checks_method(self):
        """Test http matcher requires the method."""
        matcher = matchers.http('post', '/users')

        assert matcher(make_request('https://api.example.com/users', method='POST'))
        assert not matcher(make_request('https://api.example.com/users', method='GET'))

    def test_header(self):
        """Test header matcher with and without a value."""
        request = make_request(headers={'Authorization': 'Bearer token123'})

        assert matchers.header('authorization')(request)
        assert matchers.header('Authorization', 'Bearer token123')(request)
        assert not matchers.header('Authorization', 'Bearer other')(request)
        assert not matchers.header('X-Missing')(request)

    def test_all_of(self):
        """Test all_of combines matchers."""
        matcher = matchers.all_of(matchers.http('GET', '/users/*'), matchers.header('Accept'))

        assert matcher(make_request(headers={'Accept': 'application/json'}))
        assert not matcher(make_request(method='POST', headers={'Accept': 'application/json'}))


class TestBuilders:
    """Test stock builders."""

    def test_failure(self):
        """Test failure builder carries the error."""
        error = TimeoutError("slow")
        outcome = builders.failure(error)(make_request())

        assert outcome == Failure(error)

    def test_http_defaults(self):
        """Test http builder defaults to 200 without content."""
        request = make_request()
        outcome = builders.http()(request)

        assert isinstance(outcome, Success)
        assert outcome.response.status_code == 200
        assert outcome.response.reason == 'OK'
        assert outcome.response.url == request.url
        assert isinstance(outcome.download, NoContent)

    def test_http_with_stream(self):
        """Test http builder passes the download through."""
        download = StreamContent(b'abc', chunk_size=1)
        outcome = builders.http(206, {'X-Id': '1'}, download)(make_request())

        assert outcome.download is download
        assert outcome.response.headers['x-id'] == '1'

    def test_json(self):
        """Test json builder serializes the body."""
        outcome = builders.json({'id': 1}, status=201)(make_request())

        assert outcome.response.status_code == 201
        assert outcome.response.headers['Content-Type'].startswith('application/json')
        assert isinstance(outcome.download, Content)
        assert json.loads(outcome.download.data) == {'id': 1}

    def test_json_unserializable(self):
        """Test json builder rejects bodies it cannot serialize."""
        with pytest.raises(TypeError):
            builders.json({'when': object()})

    def test_text(self):
        """Test text builder encodes the body."""
        outcome = builders.text('héllo')(make_request())

        assert outcome.download.data == 'héllo'.encode('utf-8')
        assert 'charset=utf-8' in outcome.response.headers['Content-Type']
