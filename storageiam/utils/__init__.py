from .utils import async_to_blocking, first_extant_file

__all__ = [
    'async_to_blocking',
    'first_extant_file',
]
