"""
Test application factory and configuration.
"""

import pytest
from app import create_app
from config import ProductionConfig
from models.user import get_user_by_username


class TestAppFactory:
    """Test Flask application factory."""

    def test_create_app_development(self):
        """Test app creation with development config."""
        app = create_app('development')
        assert app is not None
        assert app.config['DEBUG'] is True
        assert app.config['TESTING'] is False

    def test_create_app_test(self):
        """Test app creation with test config."""
        app = create_app('test')
        assert app is not None
        assert app.config['TESTING'] is True
        assert app.config['WTF_CSRF_ENABLED'] is False

    def test_create_app_default(self):
        """Test app creation with default config."""
        app = create_app()
        assert app is not None

    def test_app_has_blueprints(self):
        """Test that all blueprints are registered."""
        app = create_app('test')
        blueprint_names = list(app.blueprints.keys())

        assert 'auth' in blueprint_names
        assert 'api' in blueprint_names
        assert 'reservations' in blueprint_names

    def test_app_has_extensions(self):
        """Test that extensions are initialized."""
        app = create_app('test')

        # Check login manager
        assert hasattr(app, 'login_manager')
        assert 'csrf' in app.extensions


class TestAppConfiguration:
    """Test application configuration."""

    def test_secret_key_set(self):
        """Test that secret key is configured."""
        app = create_app('test')
        assert app.config['SECRET_KEY'] is not None
        assert len(app.config['SECRET_KEY']) > 0

    def test_database_path_set(self):
        """Test that database path is configured."""
        app = create_app('test')
        assert 'DATABASE_PATH' in app.config
        assert app.config['DATABASE_TIMEOUT'] > 0

    def test_reservation_policy(self):
        app = create_app('test')
        assert app.config['MIN_ADVANCE_DAYS'] == 2
        assert app.config['BUSINESS_HOURS_START'] == '07:00'
        assert app.config['BUSINESS_HOURS_END'] == '21:00'

    def test_app_name_set(self):
        """Test that app name is configured."""
        app = create_app('test')
        assert app.config.get('APP_NAME') == 'Venue Reservations'

    def test_production_requires_secret_key(self, monkeypatch):
        monkeypatch.delenv('SECRET_KEY', raising=False)
        with pytest.raises(ValueError):
            ProductionConfig.validate()

    def test_production_requires_long_secret_key(self, monkeypatch):
        monkeypatch.setenv('SECRET_KEY', 'short')
        with pytest.raises(ValueError):
            ProductionConfig.validate()


class TestCLICommands:
    """Test CLI commands."""

    def test_cli_commands_registered(self):
        """Test that CLI commands are registered."""
        app = create_app('test')

        # Get registered CLI commands
        commands = list(app.cli.commands.keys())

        assert 'init-db' in commands
        assert 'create-user' in commands

    def test_create_user(self, app):
        runner = app.test_cli_runner()

        result = runner.invoke(args=[
            'create-user', 'sc', 'sc@example.edu', '--org-id', '1',
            '--full-name', 'Student Affairs', '--password', 'secret123'
        ])

        assert 'User created successfully' in result.output
        user = get_user_by_username('sc')
        assert user['role'] == 'admin'
        assert user['org_name'] == 'Center for Student Affairs Office'

    def test_create_user_duplicate(self, app):
        runner = app.test_cli_runner()

        result = runner.invoke(args=[
            'create-user', 'admin', 'other@example.edu', '--password', 'secret123'
        ])

        assert 'Error creating user' in result.output
        assert get_user_by_username('admin')['email'] == 'admin@example.edu'

    def test_init_db(self, app):
        runner = app.test_cli_runner()

        result = runner.invoke(args=['init-db'])

        assert 'Database initialized successfully!' in result.output
        assert get_user_by_username('admin') is not None

    def test_create_user_rejects_bad_email(self, app):
        runner = app.test_cli_runner()

        result = runner.invoke(args=['create-user', 'sc', 'not-an-email', '--password', 'secret123'])

        assert 'Invalid email address' in result.output
        assert get_user_by_username('sc') is None
