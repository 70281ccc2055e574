# ==============================================================================
# TACO CLOUD - Diseño de tacos y pedidos
# ==============================================================================
# La app Flask vive en taco_cloud.main (importarla la crea).
# Backends de persistencia intercambiables con TACO_BACKEND:
#   relational | document | wide_column
# ==============================================================================

__version__ = '0.1.0'
