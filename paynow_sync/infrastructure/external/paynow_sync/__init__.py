"""
Pipeline de sincronización one-way: PayNow (órdenes completadas) -> PostgreSQL.

Este paquete está diseñado para ejecutarse como job (cron / task scheduler),
no como servicio de larga duración.

Objetivos de diseño:
- Idempotencia: se puede ejecutar N veces sin duplicar datos.
- Esquema explícito y tipado en PostgreSQL (tabla paynow_orders).
- Sin reintentos: cualquier error de red o base de datos termina la corrida.
"""
