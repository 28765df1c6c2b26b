# Services package init
"""
DeviceLab Backend — Services Layer
====================================

What:  Business logic layer sitting between routes (HTTP) and the store.

Service Inventory:
    - DeviceService: Device CRUD and the cascade to scenes
    - SceneService:  Scene CRUD with device existence checks
    - TestService:   Test CRUD, bulk create and start/stop toggle
    - validation:    Shared field rules (names, IPv4, ids, state)
    - persistence:   Commit/lookup wrappers that classify store errors

Dependency order: Device → Scene (checks Device) → Test (checks Scene).
Services are stateless singletons; the session is passed into every call.
"""
