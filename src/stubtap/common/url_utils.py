"""
StubTap URL Utilities

Shared URL normalization and pattern matching used by the stock matchers.
"""

import re
from urllib.parse import urlparse, parse_qs, urlencode, urlunparse


class URLMatcher:
    """Handles URL matching logic for stub matchers."""

    @staticmethod
    def normalize_url(url: str, strip_query: bool = False) -> str:
        """
        Normalize URL for comparison.

        Args:
            url: URL to normalize
            strip_query: If True, remove query parameters

        Returns:
            Normalized URL string
        """
        parsed = urlparse(url)
        query = ''
        if not strip_query:
            # Sort query parameters for consistent comparison
            query = urlencode(sorted(parse_qs(parsed.query, keep_blank_values=True).items()), doseq=True)

        return urlunparse((
            parsed.scheme.lower(),
            parsed.netloc.lower(),
            parsed.path or '/',
            parsed.params,
            query,
            ''  # Remove fragment
        ))

    @staticmethod
    def pattern_to_regex(pattern: str) -> 're.Pattern[str]':
        """
        Compile a path or URL pattern into an anchored regex.

        Supports:
        - {name} (any single segment)
        - * (any single segment)
        - ** (any number of segments)
        """
        parts = re.split(r'(\{[^}/]+\}|\*\*|\*)', pattern)
        regex = []
        for part in parts:
            if part == '**':
                regex.append('.*')
            elif part == '*' or (part.startswith('{') and part.endswith('}')):
                regex.append('[^/]+')
            else:
                regex.append(re.escape(part))
        return re.compile('^' + ''.join(regex) + '$')

    @staticmethod
    def is_pattern(pattern: str) -> bool:
        """Whether ``pattern`` contains wildcards or named segments."""
        return bool(re.search(r'\*|\{[^}/]+\}', pattern))

    @staticmethod
    def url_matches(url: str, pattern: str) -> bool:
        """
        Check a request URL against a URL or path pattern.

        Patterns with a scheme are compared against the whole URL (query
        included when the pattern has one), others against the path only.

        Args:
            url: Request URL
            pattern: Literal or wildcard pattern

        Returns:
            True if the URL matches
        """
        pattern_parsed = urlparse(pattern)
        if pattern_parsed.scheme:
            strip_query = not pattern_parsed.query
            target = URLMatcher.normalize_url(url, strip_query=strip_query)
            if not URLMatcher.is_pattern(pattern):
                return target == URLMatcher.normalize_url(pattern, strip_query=strip_query)
            if strip_query:
                target = target.split('?', 1)[0]
            return bool(URLMatcher.pattern_to_regex(pattern).match(target))

        path = urlparse(url).path or '/'
        if not URLMatcher.is_pattern(pattern):
            return path == pattern
        return bool(URLMatcher.pattern_to_regex(pattern).match(path))
