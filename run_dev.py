#!/usr/bin/env python3
"""Development server runner for Reef Magazine."""

import os
import sys
from pathlib import Path


def setup_environment():
    """Set up the development environment."""
    project_root = Path(__file__).parent

    try:
        from dotenv import load_dotenv
        env_file = project_root / '.env'
        if env_file.exists():
            load_dotenv(env_file)
            print(f"✓ Loaded environment from {env_file}")
        else:
            print(f"⚠️ No .env file found at {env_file}")
    except ImportError:
        print("⚠️ python-dotenv not installed, environment variables may not load")

    os.environ.setdefault('FLASK_APP', 'reefmag')
    os.environ.setdefault('APP_ENV', 'development')


def check_dependencies():
    """Check if required dependencies are installed."""
    try:
        import flask
        print(f"✓ Flask {flask.__version__} installed")
    except ImportError:
        print("❌ Flask not installed. Run: pip install -e .")
        return False

    try:
        import bcrypt  # noqa: F401
        print("✓ bcrypt installed")
    except ImportError:
        print("❌ bcrypt not installed. Run: pip install -e .")
        return False

    return True


def initialize_data():
    """Create the collection files and upload folders if they are missing."""
    try:
        from reefmag import create_app
        from reefmag.services.uploads import ensure_upload_dirs

        app = create_app()
        with app.app_context():
            store = app.extensions['reefmag']['store']
            for collection in app.extensions['reefmag']['collections']:
                store.ensure(collection)
            ensure_upload_dirs()
            print(f"✓ Data directory ready at {store.data_dir.resolve()}")
        return True
    except Exception as e:
        print(f"❌ Data initialization failed: {e}")
        return False


def run_development_server():
    """Run the Flask development server."""
    from reefmag import create_app

    app = create_app()
    port = app.config['PORT']

    print("\n" + "=" * 60)
    print("🚀 Starting Reef Magazine Development Server")
    print("=" * 60)
    print(f"Environment: {app.config['APP_ENV']}")
    print(f"Data directory: {app.config['DATA_DIR']}")
    print(f"Admin email: {app.config.get('ADMIN_EMAIL') or 'Not configured'}")
    print("\n📱 Access the application at:")
    print(f"   • http://localhost:{port}")
    print("\n🛠️ To create the administrator account, run in another terminal:")
    print("   flask --app reefmag user create --email $ADMIN_EMAIL --password <password>")
    print("\n⏹️ Press Ctrl+C to stop the server")
    print("=" * 60)

    app.run(host='0.0.0.0', port=port, debug=True, use_reloader=True)


def main():
    """Main function to set up and run the development server."""
    print("Reef Magazine - Development Setup")
    print("=" * 60)

    setup_environment()

    if not check_dependencies():
        print("\n❌ Dependencies check failed. Please install the package:")
        print("   pip install -e .")
        sys.exit(1)

    if not initialize_data():
        sys.exit(1)

    try:
        run_development_server()
    except KeyboardInterrupt:
        print("\n\n🛑 Development server stopped by user")


if __name__ == "__main__":
    main()
