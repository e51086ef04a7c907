import logging
import click
from bazario import db, bcrypt
from sqlalchemy import inspect as sql_inspect, text
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

SAMPLE_PASSWORD = 'bazario123'

SAMPLE_CAMPAIGNS = [
    {
        'title': 'Eco-Friendly Water Bottle',
        'description': 'A sustainable, BPA-free water bottle for eco-conscious consumers.',
        'product_images': ['https://via.placeholder.com/300x200?text=Water+Bottle'],
        'commission_rate': 15,
        'target_regions': ['Maharashtra', 'Delhi'],
        'target_demographics': {'age_groups': ['18-25', '26-35'], 'income_levels': [], 'interests': 'Urban youth'},
        'sales_materials': {'brochures': None, 'videos': None, 'training_docs': 'https://example.com/training.pdf'},
    },
    {
        'title': 'Organic Skincare Cream',
        'description': 'Natural skincare cream made with organic ingredients.',
        'product_images': ['https://via.placeholder.com/300x200?text=Skincare+Cream'],
        'commission_rate': 20,
        'target_regions': ['Karnataka', 'Tamil Nadu'],
        'target_demographics': {'age_groups': ['26-35', '36-45'], 'income_levels': [], 'interests': 'Skincare'},
        'sales_materials': {'brochures': None, 'videos': None, 'training_docs': 'https://example.com/skincare-guide.pdf'},
    },
    {
        'title': 'Smart Fitness Tracker',
        'description': 'Track your fitness goals with our advanced wearable device.',
        'product_images': ['https://via.placeholder.com/300x200?text=Fitness+Tracker'],
        'commission_rate': 18,
        'target_regions': [],
        'target_demographics': {'age_groups': ['18-25', '26-35', '36-45'], 'income_levels': [], 'interests': 'Fitness'},
        'sales_materials': {'brochures': None, 'videos': None, 'training_docs': None},
    },
]


def check_database_connection():
    """Check if database connection is working"""
    try:
        db.session.execute(text('SELECT 1'))
        return True
    except SQLAlchemyError:
        logger.exception("Database connection failed")
        return False


def get_missing_tables():
    existing = set(sql_inspect(db.engine).get_table_names())
    return [name for name in db.metadata.tables if name not in existing]


def initialize_database():
    """Create any tables the models define but the database lacks."""
    if not check_database_connection():
        return False

    missing = get_missing_tables()
    if missing:
        logger.info("Creating %d missing tables: %s", len(missing), ', '.join(missing))
        db.create_all()
    else:
        logger.info("All model tables exist in the database.")
    return True


def create_sample_data():
    """Create a sample startup, seller and catalog if no profiles exist."""
    from bazario.models import Profile, Campaign

    if Profile.query.first():
        logger.info("Profiles already exist, skipping sample data.")
        return False

    password_hash = bcrypt.generate_password_hash(SAMPLE_PASSWORD).decode('utf-8')
    startup = Profile(
        full_name='Asha Founder',
        email='founder@bazario.example',
        password_hash=password_hash,
        user_type='startup',
        company_name='GreenLeaf Goods',
        city='Mumbai',
        state='Maharashtra'
    )
    seller = Profile(
        full_name='Ravi Seller',
        email='seller@bazario.example',
        password_hash=password_hash,
        user_type='seller',
        city='Chennai',
        state='Tamil Nadu',
        bio='Runs a neighbourhood store and sells to local customers.'
    )
    db.session.add_all([startup, seller])
    db.session.flush()

    for sample in SAMPLE_CAMPAIGNS:
        db.session.add(Campaign(user_id=startup.id, status='active', commission_type='percentage', **sample))

    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Could not create sample data")
        return False

    logger.info("Sample data created.")
    return True


# Flask CLI commands registration
def register_db_commands(app):
    """Register database commands with Flask CLI"""

    @app.cli.command('init_db')
    def init_db_command():
        """Creates missing tables."""
        if initialize_database():
            click.echo('Database ready.')
        else:
            raise click.ClickException('Database connection failed. Check DATABASE_URL.')

    @app.cli.command('seed_db')
    def seed_db_command():
        """Creates tables and loads sample profiles and campaigns."""
        initialize_database()
        if create_sample_data():
            click.echo(f'Sample data created. Sample accounts use the password {SAMPLE_PASSWORD!r}.')
        else:
            click.echo('Sample data not created (database already has profiles).')

    @app.cli.command('reset_db')
    @click.confirmation_option(prompt='This will delete all data. Continue?')
    def reset_db_command():
        """Drops all tables and re-initializes the database."""
        db.drop_all()
        initialize_database()
        click.echo('Database has been reset.')
