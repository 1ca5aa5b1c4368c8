# =================================================================
# Roles del Sistema
# =================================================================
# Roles almacenados en la columna `usuarios.rol`.
# =================================================================

ADMIN_ROLE_NAME = "admin"
SUPERVISOR_ROLE_NAME = "supervisor"
TECNICO_ROLE_NAME = "tecnico"

ALL_ROLES = (ADMIN_ROLE_NAME, SUPERVISOR_ROLE_NAME, TECNICO_ROLE_NAME)

# Roles que pueden recalcular el stock de todo el inventario
STOCK_MAINTENANCE_ROLES = {ADMIN_ROLE_NAME, SUPERVISOR_ROLE_NAME}
