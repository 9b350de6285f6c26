import logging

from biz_manager import performance_logger
from biz_manager.performance_logger import (
    get_function_stats,
    log_route_performance,
    profile_function,
    reset_stats,
)


def test_profile_function_collects_stats():
    reset_stats()

    @profile_function(name="Suma de prueba")
    def add(a, b):
        return a + b

    assert add(2, 3) == 5
    assert add(1, 1) == 2

    stats = get_function_stats()
    if performance_logger.ENABLE_PROFILING:
        assert stats["Suma de prueba"]["calls"] == 2
    else:
        assert stats == {}
    reset_stats()
    assert get_function_stats() == {}


def test_slow_routes_raise_log_level(caplog):
    with caplog.at_level(logging.DEBUG, logger='biz_manager.performance'):
        log_route_performance('GET', '/api/analytics', '/api/analytics', 10)
        log_route_performance('GET', '/api/analytics', '/api/analytics', 400, 'admin')
        log_route_performance('POST', '/api/orders/1/status', '/api/orders/<order_id>/status', 900)

    levels = [r.levelno for r in caplog.records]
    assert levels == [logging.DEBUG, logging.WARNING, logging.CRITICAL]
    assert 'Ver analítica' in caplog.records[0].getMessage()
    assert 'Cambiar estado pedido' in caplog.records[2].getMessage()
