"""Infrastructure modules for the notification dispatch service.

Centralized infrastructure components:
- configuration: Settings management (Settings and its sections)
- logging: structlog setup and request context
- operations: Operation results and error classification
- clients: boto3 and Twilio client factories
- notifications: Recipient validation, providers and dispatcher
- events: In-process event bus (queue boundary)
- services: Dependency injection (SettingsDep, NotificationServiceDep)
"""
