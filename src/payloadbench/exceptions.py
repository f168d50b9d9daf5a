"""Exception hierarchy for payloadbench."""


class PayloadBenchError(Exception):
    """Base exception for payloadbench."""


class ConfigError(PayloadBenchError):
    """Invalid or missing configuration (credentials, dataset path)."""


class ModelClientError(PayloadBenchError):
    """A token-count or generation call to the model API failed."""

    def __init__(self, format_name: str, operation: str, cause: BaseException):
        super().__init__(f"{operation} failed for {format_name}: {cause}")
        self.format_name = format_name
        self.operation = operation


class ReportParseError(PayloadBenchError):
    """A stored trial report could not be parsed back into a record."""


class AggregationError(PayloadBenchError):
    """Aggregation had no usable input."""
