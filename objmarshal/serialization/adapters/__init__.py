from .max_bytes import MaxBytesExceededError, MaxBytesSerializer

__all__ = [
    'MaxBytesExceededError',
    'MaxBytesSerializer',
]
