"""Custom exceptions used throughout the rtlsim package."""

from typing import Any, Optional


class SimulatorError(Exception):
    """Base exception for all simulator errors.

    All rtlsim-specific exceptions inherit from this class, so a driver can
    catch every kernel failure with a single except clause.
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Additional context about the error
        """

        super().__init__(message)
        self.details = details or {}


class ConfigurationError(SimulatorError):
    """Raised when a testbench configuration is invalid.

    This includes:
    - YAML that cannot be parsed
    - Missing required keys
    - Values of the wrong shape
    """

    def __init__(
        self,
        config_key: Optional[str] = None,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        """Initialize configuration error.

        Args:
            config_key: The configuration key that caused the error
            message: Description of what's wrong. If omitted, config_key is
                treated as the message and the key defaults to "configuration".
            details: Additional context
        """
        if message is None:
            message = config_key or "Invalid configuration"
            config_key = "configuration"
        if config_key is None:
            config_key = "configuration"

        full_message = f"Configuration error for '{config_key}': {message}"
        super().__init__(message=full_message, details=details)
        self.config_key = config_key


class UnsetSignalError(SimulatorError):
    """Raised when a value is read from a wire that was never driven.

    Examples:
    - Sampling an output before the module's settle pass ran
    - Committing a register whose staged input was never driven
    - Reading an input inside settle() before the driver drove it

    This is always an ordering bug in the driver or in a settle pass.
    The kernel never substitutes a default value.
    """

    def __init__(
        self,
        signal: Optional[str] = None,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        if message is None:
            label = f"'{signal}'" if signal else "<anonymous>"
            message = f"Read of unset signal {label}"
        if signal is not None:
            details = details or {}
            details["signal"] = signal

        super().__init__(message=message, details=details)
        self.signal = signal


class SignalTypeError(SimulatorError, TypeError):
    """Raised when a typed wire is driven with a value of another type."""

    def __init__(
        self,
        signal: Optional[str],
        expected: type,
        value: Any,
        details: Optional[dict[str, Any]] = None,
    ):
        label = f"'{signal}'" if signal else "<anonymous>"
        message = (
            f"Signal {label} carries {expected.__name__}, "
            f"got {type(value).__name__}: {value!r}"
        )
        details = details or {}
        details["expected"] = expected.__name__
        details["actual"] = type(value).__name__
        super().__init__(message=message, details=details)
        self.signal = signal
        self.expected = expected
        self.value = value


class SchemaError(SimulatorError):
    """Raised when a module definition cannot be compiled.

    Examples:
    - An input/output field that is not a Signal or VecSignal
    - A role tag outside the closed vocabulary
    - A class that is not a Module subclass

    Schema errors only happen while a module class is being defined.
    """

    def __init__(
        self,
        module: str,
        message: str,
        field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        details = details or {}
        details["module"] = module
        if field is not None:
            details["field"] = field
            full_message = f"Invalid schema for {module}.{field}: {message}"
        else:
            full_message = f"Invalid schema for {module}: {message}"

        super().__init__(message=full_message, details=details)
        self.module = module
        self.field = field


class UnknownPortError(SimulatorError):
    """Raised when a driver addresses a port the module does not expose."""

    def __init__(
        self,
        module: str,
        port: str,
        direction: str,
        details: Optional[dict[str, Any]] = None,
    ):
        message = f"Module {module} has no {direction} port '{port}'"
        details = details or {}
        details["module"] = module
        details["port"] = port
        super().__init__(message=message, details=details)
        self.module = module
        self.port = port
        self.direction = direction
