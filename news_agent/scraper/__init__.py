"""
News scraper module for the News Agent.

This module provides news retrieval from the news aggregation site: building
the target location for a query, loading the page in a browser session, and
extracting article records with layered selector fallbacks.
"""

# Lazy imports so the agent package can load without a browser installed
__all__ = [
    'NewsQuery',
    'InvalidArgumentError',
    'build_target_location',
    'ArticleExtractor',
    'ArticleRecord',
    'NewsRetrievalService',
    'RetrievalError',
    'BrowserError',
    'PageTimeoutError',
    'create_browser_launcher'
]

_EXPORTS = {
    'NewsQuery': 'query',
    'InvalidArgumentError': 'query',
    'build_target_location': 'query',
    'ArticleExtractor': 'extractor',
    'ArticleRecord': 'extractor',
    'NewsRetrievalService': 'service',
    'RetrievalError': 'service',
    'BrowserError': 'browser',
    'PageTimeoutError': 'browser',
    'create_browser_launcher': 'browser',
}


def __getattr__(name):
    if name in _EXPORTS:
        from importlib import import_module
        module = import_module(f".{_EXPORTS[name]}", __name__)
        return getattr(module, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
