"""
Panel de gestión de negocio: pedidos, inventario, gastos y métricas.

Capas:
    models/        entidades y enumeraciones
    repositories/  persistencia JSON
    services/      almacén de registros, métricas, pedidos, reportes
    main.py        API JSON (Flask)
"""

__version__ = '1.0.0'
