import os, sys, pytest
# Ensure the backend directory is on path so 'medimart' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from medimart import create_app, get_db
from medimart.models.account import Base
# Import all model modules to ensure tables are registered before create_all
import medimart.models.catalog_item  # noqa: F401
import medimart.models.banner  # noqa: F401
import medimart.models.audit  # noqa: F401

@pytest.fixture(scope='session', autouse=True)
def app_instance():
    os.environ['DATABASE_URL'] = 'sqlite+pysqlite:///:memory:'
    os.environ['JWT_SECRET_KEY'] = 'medimart-test-secret-key-0123456789abcdef'
    app = create_app()
    # After app and blueprints are registered, ensure all tables exist
    with app.app_context():
        engine = get_db().get_bind()
        Base.metadata.create_all(engine)
    yield app

@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()

@pytest.fixture()
def admin_headers(app_instance):
    from tests.test_lifecycle_helpers import admin_headers as _admin_headers
    return _admin_headers(app_instance)
