"""
Database build and number sequences
"""
from app import db
from app.build import build_database, verify_critical_data
from app.data.core.catalog import Division, Material, Service, Supplier
from app.data.core.sequences import ExpressionNumberManager, OrderNumberManager
from app.data.core.user_info.user import Role, User


def test_build_is_idempotent(app):
    build_database(app=app)
    build_database(app=app)

    assert verify_critical_data()
    assert User.query.filter_by(username='admin').one().role == Role.ADMINISTRATOR
    assert User.query.count() == 4
    assert Division.query.count() == 2
    assert Material.query.count() == 3
    assert Supplier.query.count() == 2

    service = Service.query.filter_by(code='TEC-MNT').one()
    assert service.division.code == 'TEC'


def test_build_without_seed_data(app):
    build_database(with_seed_data=False, app=app)
    assert verify_critical_data()
    assert Material.query.count() == 0


def test_sequences_are_monotonic(app):
    first = ExpressionNumberManager.get_next_id()
    second = ExpressionNumberManager.get_next_id()
    db.session.commit()

    assert second == first + 1
    assert ExpressionNumberManager.get_current_sequence_value() == second
    # Counters are independent per entity type
    assert OrderNumberManager.get_current_sequence_value() == 0


def test_rolled_back_increment_is_not_consumed(app):
    issued = ExpressionNumberManager.get_next_id()
    db.session.rollback()
    assert ExpressionNumberManager.get_next_id() == issued
    db.session.rollback()
