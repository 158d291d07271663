"""
WSGI config para o projeto Manus Libros.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'manuslibros.settings')

application = get_wsgi_application()
