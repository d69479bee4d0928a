"""
===============================================================================
APPLICATION LAYER
===============================================================================

Los casos de uso viven en `usecases/` (por feature). Esta capa depende solo de
los puertos de `domain/` y de los helpers de `identity/`; nunca de
infraestructura concreta.
===============================================================================
"""
