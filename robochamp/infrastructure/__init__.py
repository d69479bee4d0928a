"""
Infrastructure Layer

Adaptadores concretos de los puertos de `domain/`:
  - db/: pool de conexiones PostgreSQL
  - repositories/: credential store (Postgres / in-memory)
  - notifications/: envío de emails (consola / Resend)
"""
