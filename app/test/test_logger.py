"""
JSON log lines
"""
import json
import logging

from app.utils.logger import JsonFormatter, get_logger


def _record(**extra):
    record = logging.LogRecord('procurement.test', logging.WARNING, __file__, 10, 'record reception rejected', None, None)
    record.__dict__.update(extra)
    return record


def test_log_line_is_json_with_context():
    formatter = JsonFormatter({'level': 'levelname', 'logger': 'name', 'message': 'message'})
    line = json.loads(formatter.format(_record(operation='record reception', error_code='over_delivery',
                                               details={'remaining': 4})))

    assert line == {
        'level': 'WARNING',
        'logger': 'procurement.test',
        'message': 'record reception rejected',
        'operation': 'record reception',
        'error_code': 'over_delivery',
        'details': {'remaining': 4},
    }


def test_context_fields_are_optional():
    line = json.loads(JsonFormatter().format(_record()))
    assert line == {'message': 'record reception rejected'}


def test_loggers_share_the_procurement_tree():
    assert get_logger('buisness.orders').name == 'procurement.buisness.orders'
    assert get_logger('procurement.build').name == 'procurement.build'
    assert get_logger().name == 'procurement'
