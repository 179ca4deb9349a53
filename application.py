"""
Cabinet Shop Manager API

JSON API for a cabinet shop: quotes made of spaces and cabinet items,
orders converted from approved quotes, partial-payment receipts, the
product catalog and pricing settings.

Layout:
- app_init.py: application factory (config, logging, security, database)
- app/api/: Flask Blueprints, one per resource
- services/: repositories holding the business rules
- database/: SQLAlchemy models, engine/session management, seed data
"""
import os

from app_init import create_app

app = create_app()


if __name__ == '__main__':
    # Tables are created via Alembic migrations: alembic upgrade head
    port = int(os.environ.get('PORT', 5000))
    app.run(host='0.0.0.0', port=port, debug=app.debug)
