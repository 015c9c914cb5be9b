# Routes package init
"""
AccessLog - Demo Routes
=========================

Route Inventory:
    - health.py:  GET /health  (service health check)
"""
