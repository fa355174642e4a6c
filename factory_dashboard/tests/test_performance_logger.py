import logging

from factory_dashboard import performance_logger


def test_disabled_profiling_returns_the_function(monkeypatch):
    monkeypatch.setattr(performance_logger, 'ENABLE_PROFILING', False)

    def add(a, b):
        return a + b

    assert performance_logger.profile_function(add) is add


def test_function_stats_and_report(monkeypatch, caplog):
    monkeypatch.setattr(performance_logger, 'ENABLE_PROFILING', True)
    performance_logger.reset_stats()

    @performance_logger.profile_function(name="Sumar")
    def add(a, b):
        return a + b

    assert add(1, 2) == 3
    assert add(2, 2) == 4

    stats = performance_logger.get_function_stats()
    assert stats['Sumar']['calls'] == 2
    assert stats['Sumar']['max_time'] >= stats['Sumar']['avg_time'] >= 0

    with caplog.at_level(logging.INFO, logger=performance_logger.SLOW_FUNCTIONS_LOGGER):
        performance_logger.write_function_stats_report()
    assert 'Función: Sumar | Llamadas: 2' in caplog.text

    performance_logger.reset_stats()
    assert performance_logger.get_function_stats() == {}


def test_report_without_calls_writes_nothing(caplog):
    performance_logger.reset_stats()
    with caplog.at_level(logging.INFO, logger=performance_logger.SLOW_FUNCTIONS_LOGGER):
        performance_logger.write_function_stats_report()
    assert caplog.records == []
