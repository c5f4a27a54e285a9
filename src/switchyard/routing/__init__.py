"""Routing: ordered route table with continuation-based dispatch.

Routes are matched in the order they were registered. A matching handler
may pass the request on to the rest of the table by awaiting ``next()``.
"""
