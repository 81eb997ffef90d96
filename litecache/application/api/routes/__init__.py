"""
API Routes Package

- health: liveness and detailed health
- cache_internal: replica -> primary forwarding endpoint
- cache_admin: operator cache surface
- admin: metrics and stats
"""
