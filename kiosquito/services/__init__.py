# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Esta capa contiene TODA la lógica de negocio del núcleo.
#
# PRINCIPIOS:
# 1. Los servicios orquestan operaciones entre repositorios
# 2. Validan SIEMPRE la entrada (models.validation), confíen o no en el llamador
# 3. Las rutas (main.py) solo llaman a servicios
# 4. Los errores se propagan al llamador (kiosquito.errors)
#
# ESTRUCTURA:
# ├── user_service.py      → Autenticación, hash de contraseñas
# ├── inventory_service.py → Productos
# ├── currency_service.py  → Monedas, protección de CUP, conversión
# ├── sales_service.py     → Ventas con descuento de stock, resúmenes
# └── seed_service.py      → Datos iniciales y migraciones de datos
# ==============================================================================

from kiosquito.services.user_service import UserService
from kiosquito.services.inventory_service import InventoryService
from kiosquito.services.currency_service import CurrencyService
from kiosquito.services.sales_service import SalesService
from kiosquito.services.seed_service import SeedService

__all__ = [
    'UserService',
    'InventoryService',
    'CurrencyService',
    'SalesService',
    'SeedService',
]
