"""
Infrastructure components: identity map cache, HTTP request execution and
error reporting.
"""
