import os

from taco_cloud import performance_logger
from taco_cloud.errors import StorageError
from taco_cloud.performance_logger import (
    clear_logs, get_function_stats, get_log_summary, log_error,
    profile_function, write_function_stats_report,
)


@profile_function(name='Suma')
def _add(a, b):
    return a + b


def test_profile_function_collects_stats():
    assert _add(1, 2) == 3
    _add(2, 3)
    stats = get_function_stats()['Suma']
    assert stats['calls'] == 2
    assert stats['max_time'] >= stats['avg_time'] >= 0


def test_disabled_profiling_skips_stats():
    performance_logger.configure(enabled=False)
    _add(1, 1)
    assert 'Suma' not in get_function_stats()


def test_log_error_writes_traceback(logs_dir):
    try:
        raise StorageError('disco lleno', 'document')
    except StorageError as exc:
        log_error('Colocar pedido', exc, user='jdoe')

    with open(logs_dir / 'errors.log', encoding='utf-8') as f:
        content = f.read()
    assert 'Contexto: Colocar pedido' in content
    assert 'Usuario: jdoe' in content
    assert 'StorageError: disco lleno' in content
    assert 'Traceback' in content


def test_report_summary_and_clear(logs_dir):
    _add(1, 2)
    write_function_stats_report()

    summary = get_log_summary()
    assert summary['slow_functions']['exists']
    assert 'FUNCIÓN: Suma' in (logs_dir / 'slow_functions.log').read_text(encoding='utf-8')
    assert not summary['errors']['exists']

    clear_logs()
    assert not os.path.exists(logs_dir / 'slow_functions.log')
