from . import check, install, reset, status, steps

__all__ = ['check', 'install', 'reset', 'status', 'steps']
