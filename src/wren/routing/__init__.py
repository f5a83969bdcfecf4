"""Routing — wildcard patterns, filter chains and first-match dispatch.

A request is matched by threading it through a chain of predicates
(``filter_http(request).filter_method("GET").filter_path("/item/{}")``);
a chain that survives hands the request to its handler. A ``Dispatcher``
tries an ordered list of such chains and returns the first result.
"""
