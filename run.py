"""
MIRA Portal - Entry Point
"""

import os
from mira_portal import create_app

app = create_app(os.getenv('FLASK_ENV', 'development'))

if __name__ == '__main__':
    app.logger.info('MIRA Portal listening on http://localhost:5000')
    app.run(host='0.0.0.0', port=5000, debug=app.config.get('DEBUG', False))
