class ConfigurationError(RuntimeError):
    """No time profile could be resolved, not even the system default."""


class UpstreamUnavailable(RuntimeError):
    """A rollup, profile or event store read failed."""


class RecordNotFound(KeyError):
    def __init__(self, kind: str, record_id: object) -> None:
        super().__init__(f"{kind} '{record_id}' not found")
        self.kind = kind
        self.record_id = record_id

    def __str__(self) -> str:
        return str(self.args[0])
