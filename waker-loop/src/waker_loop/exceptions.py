class ProtocolError(RuntimeError):
    """Raised when a task state transition breaks the resumption protocol."""
