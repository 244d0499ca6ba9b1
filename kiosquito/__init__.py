# ==============================================================================
# KIOSQUITO - Núcleo de punto de venta con persistencia local (SQLite)
# ==============================================================================

__version__ = '1.0.0'
