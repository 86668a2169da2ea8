from storageiam.version import __pip_version__, __version__


def version() -> str:
    return __version__


__all__ = [
    '__pip_version__',
    '__version__',
    'version',
]
