"""Infrastructure modules for the form relay service.

Centralized infrastructure components:
- configuration: Settings management (Settings and its sub-settings)
- logging: Structured logging (configure_logging, get_module_logger)
- operations: Operation results and error classification
- clients: AWS clients (DynamoDB)
- notifications: Idempotent notification delivery (store, sender, dispatcher)
- models: API response wrappers
- services: Dependency injection services (SettingsDep, FormsServiceDep, get_settings)
"""
