#!/usr/bin/env python3
"""
Main build orchestrator for the procurement system
Creates tables and sequence counters, then inserts critical and seed data
"""

from decimal import Decimal
from pathlib import Path
import json

from app import create_app, db
from app.utils.logger import get_logger

logger = get_logger("procurement.build")

DATA_DIR = Path(__file__).parent / 'data' / 'core'


def _load(filename):
    path = DATA_DIR / filename
    if not path.exists():
        error_msg = f"Build data file not found: {path}"
        logger.error(error_msg)
        raise FileNotFoundError(error_msg)
    with open(path, 'r') as f:
        return json.load(f)


def build_models():
    """Create every table and the sequence counter tables"""
    from app.data.core.sequences import ALL_SEQUENCES

    db.create_all()
    logger.info("All database tables created")

    for sequence in ALL_SEQUENCES:
        sequence.create_sequence_if_not_exists()
    logger.info(f"{len(ALL_SEQUENCES)} sequence counters ready")


def verify_critical_data():
    """
    Verify that critical data is present in the database

    Returns:
        bool: True if the system and admin users exist
    """
    from app.data.core.user_info.user import User

    return (
        User.query.filter_by(username='system').first() is not None
        and User.query.filter_by(username='admin').first() is not None
    )


def insert_critical_data():
    """
    Insert critical data that must always be present

    Loads from app/data/core/build_data_critical.json. Called on every build.
    """
    from app.data.core.user_info.user import User

    critical_data = _load('build_data_critical.json')

    if verify_critical_data():
        logger.info("Critical data already present, skipping insertion")
        return

    logger.warning("Critical data missing, inserting...")
    try:
        for user_data in critical_data['Essential']['Users'].values():
            User.find_or_create_from_dict(user_data, lookup_fields=['username'], commit=False)
            logger.info(f"Inserted essential user: {user_data.get('username')}")
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"Critical data insertion failed: {e}")
        raise

    if not verify_critical_data():
        raise RuntimeError("Critical data insertion completed but verification failed")


def insert_seed_data():
    """
    Insert demonstration users and reference data from build_data_seed.json
    Idempotent: existing rows are matched on their unique fields.
    """
    from app.data.core.user_info.user import User
    from app.data.core.catalog import Division, Material, Service, Supplier

    seed = _load('build_data_seed.json')
    system_user = User.query.filter_by(username='system').first()
    system_user_id = system_user.id if system_user else None

    try:
        for user_data in seed.get('Users', []):
            User.find_or_create_from_dict(user_data, lookup_fields=['username'], commit=False)

        for division_data in seed.get('Divisions', []):
            Division.find_or_create_from_dict(
                division_data, user_id=system_user_id, lookup_fields=['code'], commit=False
            )
        db.session.flush()

        for service_data in seed.get('Services', []):
            data = dict(service_data)
            division = Division.query.filter_by(code=data.pop('division_code')).first()
            data['division_id'] = division.id
            Service.find_or_create_from_dict(data, user_id=system_user_id, lookup_fields=['code'], commit=False)

        for material_data in seed.get('Materials', []):
            data = dict(material_data)
            if data.get('unit_value') is not None:
                data['unit_value'] = Decimal(str(data['unit_value']))
            Material.find_or_create_from_dict(data, user_id=system_user_id, lookup_fields=['code'], commit=False)

        for supplier_data in seed.get('Suppliers', []):
            Supplier.find_or_create_from_dict(
                supplier_data, user_id=system_user_id, lookup_fields=['name'], commit=False
            )

        db.session.commit()
        logger.info("Seed data inserted")
    except Exception as e:
        db.session.rollback()
        logger.error(f"Seed data insertion failed: {e}")
        raise


def build_database(with_seed_data=True, app=None):
    """
    Build tables, counters and data

    Args:
        with_seed_data (bool): Insert demonstration users and catalog records
        app: Flask app to build against (default: a new app from create_app())
    """
    app = app or create_app()

    with app.app_context():
        logger.info(f"Starting database build (seed data: {with_seed_data})")
        build_models()
        insert_critical_data()
        if with_seed_data:
            insert_seed_data()
        logger.info("Database build completed successfully")


if __name__ == '__main__':
    import sys

    build_database(with_seed_data='--no-seed-data' not in sys.argv[1:])
