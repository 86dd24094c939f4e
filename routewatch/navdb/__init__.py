"""
Navigation database access and route resolution.

Handles tokenizing filed routes, detecting the navdata schema generation,
and resolving tokens into waypoints.
"""

from routewatch.navdb.resolver import RouteResolver
from routewatch.navdb.schema import NavSchema, NavSchemaV1, NavSchemaV2, detect_schema
from routewatch.navdb.tokens import tokenize_route, route_fingerprint

__all__ = [
    'RouteResolver',
    'NavSchema',
    'NavSchemaV1',
    'NavSchemaV2',
    'detect_schema',
    'tokenize_route',
    'route_fingerprint',
]
