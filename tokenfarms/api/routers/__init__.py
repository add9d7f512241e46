# This file marks the routers package for API route modules.
# Farm queries and operational checks live in separate modules.
