"""
Pytest configuration and fixtures for the procurement tests
"""
import os
import tempfile
from decimal import Decimal
from types import SimpleNamespace

import pytest

os.environ.setdefault('SECRET_KEY', 'test-secret-key')
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='procurement-logs-'))

from app import create_app
from app import db as _db
from app.build import build_models
from app.buisness.procurement.order_ledger import OrderLedger
from app.buisness.procurement.request_lifecycle import RequestLifecycle
from app.buisness.procurement.status_validator import ExpressionStatus
from app.data.core.catalog import Division, Material, Service, Supplier
from app.data.core.sequences import ALL_SEQUENCES
from app.data.core.user_info.user import Role, User


@pytest.fixture(scope='session')
def app(tmp_path_factory):
    """Create Flask application for testing on a temporary SQLite database"""
    db_path = tmp_path_factory.mktemp('db') / 'procurement_test.db'
    app = create_app({
        'TESTING': True,
        'WTF_CSRF_ENABLED': False,
        'SQLALCHEMY_DATABASE_URI': f'sqlite:///{db_path}',
        'ENABLE_HTTPS': False,
        'FORCE_HTTPS_REDIRECT': False,
        'RATELIMIT_ENABLED': False,
    })

    with app.app_context():
        build_models()
    return app


@pytest.fixture(scope='function', autouse=True)
def clean_database(app):
    """Fresh app context per test; every test starts from empty tables and zeroed counters"""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.session.remove()
        _db.drop_all()
        _db.create_all()
        for sequence in ALL_SEQUENCES:
            sequence.reset()
        _db.session.commit()


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


@pytest.fixture(scope='function')
def seed(app):
    """Users for each role plus a small catalog; returns ids only"""
    def user(username, role, is_active=True):
        record = User(
            username=username,
            email=f'{username}@procurement.test',
            full_name=username.replace('_', ' ').title(),
            role=role,
            is_active=is_active,
        )
        _db.session.add(record)
        return record

    requester = user('requester', Role.REQUESTER)
    other_requester = user('other_requester', Role.REQUESTER)
    approver = user('approver', Role.APPROVER)
    admin = user('admin', Role.ADMINISTRATOR)
    inactive = user('inactive', Role.ADMINISTRATOR, is_active=False)
    _db.session.flush()

    division = Division(name='Technical Division', code='TEC', created_by_id=admin.id)
    other_division = Division(name='General Administration', code='ADM', created_by_id=admin.id)
    _db.session.add_all([division, other_division])
    _db.session.flush()

    service = Service(name='Maintenance', code='TEC-MNT', division_id=division.id)
    foreign_service = Service(name='Accounting', code='ADM-ACC', division_id=other_division.id)
    paper = Material(code='MAT-0001', designation='A4 paper ream', unit='ream', unit_value=Decimal('4.50'))
    toner = Material(code='MAT-0002', designation='Laser printer toner', unit='unit', unit_value=Decimal('85.00'))
    supplier = Supplier(name='Office Depot Central', address='12 Market Street')
    _db.session.add_all([service, foreign_service, paper, toner, supplier])
    _db.session.commit()

    return SimpleNamespace(
        requester_id=requester.id,
        other_requester_id=other_requester.id,
        approver_id=approver.id,
        admin_id=admin.id,
        inactive_id=inactive.id,
        division_id=division.id,
        service_id=service.id,
        foreign_service_id=foreign_service.id,
        paper_id=paper.id,
        toner_id=toner.id,
        supplier_id=supplier.id,
    )


@pytest.fixture
def make_expression(seed):
    """Create an expression and walk it to ``status`` (Draft, Pending, Approved or Rejected)"""
    def _make(lines=None, status=ExpressionStatus.DRAFT, title='Office supplies'):
        if lines is None:
            lines = [{'material_id': seed.paper_id, 'quantity': 10}]
        expression = RequestLifecycle.create(seed.requester_id, title, seed.division_id, seed.service_id, lines)
        if status == ExpressionStatus.DRAFT:
            return expression
        RequestLifecycle.submit(expression.id, seed.requester_id)
        if status == ExpressionStatus.PENDING:
            return expression
        return RequestLifecycle.decide(expression.id, seed.approver_id, status)

    return _make


@pytest.fixture
def make_order(seed, make_expression):
    """Approved expression plus its purchase order (10 x 100, tax 18%, discount 5% by default)"""
    def _make(lines=None, tax_rate='18', discount_rate='5'):
        expression = make_expression(status=ExpressionStatus.APPROVED)
        if lines is None:
            lines = [{'material_id': seed.paper_id, 'quantity': 10, 'unit_price': '100'}]
        return OrderLedger.create(
            expression.id,
            seed.admin_id,
            supplier_id=seed.supplier_id,
            delivery_address='Central warehouse',
            tax_rate=tax_rate,
            discount_rate=discount_rate,
            lines=lines,
        )

    return _make


@pytest.fixture
def headers():
    """Request headers identifying the acting user"""
    def _headers(user_id):
        return {'X-Actor-Id': str(user_id)}

    return _headers
