"""Exception definitions for the podcast settings engine"""


class SettingsException(Exception):
    """Base exception for all settings engine errors.

    All custom exceptions in the settings engine inherit from this class.
    Use this as a catch-all for settings-specific errors when you don't need
    to handle specific exception types.
    """

    pass


class ConfigException(SettingsException):
    """Raised when configuration validation or loading fails.

    Use this exception when:
    - The configuration file cannot be found
    - The TOML syntax is invalid
    - Configuration validation fails (missing required fields, invalid values)
    """

    pass


class SchemaError(SettingsException):
    """Raised when a settings schema definition is malformed.

    Use this exception when:
    - Two fields in the same section share an id
    - A select field's option groups are not contiguous
    - A section is requested before the schema has been defined

    Schema errors are fatal: the settings surface refuses to render.
    """

    pass


class ValidationError(SettingsException):
    """Raised when a submitted value is rejected by its field's validator.

    Carries the offending field id and a human readable reason. A validation
    error on one field never aborts the other fields of the same submission.
    """

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class PersistenceError(SettingsException):
    """Raised when the underlying key-value store fails.

    Not retried by the engine; retrying is the store's or the caller's job.
    """

    pass


class ExternalServiceError(SettingsException):
    """Raised when a call to an external collaborator fails.

    Use this exception when:
    - The hosting service rejects or cannot check credentials
    - The hosting service is unreachable or returns a server error
    - An import request notification cannot be delivered
    """

    pass
