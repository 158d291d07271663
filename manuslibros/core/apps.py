# manuslibros/core/apps.py

from django.apps import AppConfig


class CoreConfig(AppConfig):
    name = 'manuslibros.core'
    label = 'core'
    verbose_name = 'Entidades e Regras de Negócio (Core)'
    # Sem modelos: a persistência fica na camada de Infraestrutura
    default_auto_field = 'django.db.models.BigAutoField'
