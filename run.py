import logging
import os
from bazario import create_app

logger = logging.getLogger('bazario.run')

REQUIRED_VARS = ['DATABASE_URL', 'JWT_SECRET_KEY']


def check_environment():
    """Warn about environment variables that fall back to development defaults"""
    missing_vars = [var for var in REQUIRED_VARS if not os.getenv(var)]
    for var in missing_vars:
        logger.warning("%s is not set; using the development default", var)
    return not missing_vars


app = create_app()

if __name__ == '__main__':
    check_environment()
    port = int(os.getenv('PORT', '5021'))
    logger.info("API available at http://localhost:%s/api", port)
    app.run(host='0.0.0.0', port=port, debug=os.getenv('FLASK_DEBUG') == '1')
