# Routes package init
"""
DeviceLab Backend — API Routes Package
========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - devices.py: GET/POST /devices, PUT/DELETE /devices/{id}, DELETE /devices
    - scenes.py:  GET /scenes?deviceId=, POST /scenes, PUT/DELETE /scenes/{id}
    - tests.py:   GET /tests?sceneId=, GET /tests/{id}, POST /tests,
                  POST /tests/bulk, PUT /tests/{id}/start-stop
    - health.py:  GET /health

Design Principle:
    Routes are THIN. They pull data out of the request, call one service
    method and pick the status code. Validation, existence checks and store
    access live in the services.
"""
