"""
Configuração do Celery para as notificações assíncronas.

Com EVENT_PUBLISHER_MODE=celery os eventos de domínio publicados após
o commit viram tasks (src/adapters/django_app/events/handlers.py), que
enviam os emails e tentam de novo quando o envio falha.

Uso:
    celery -A src.config.celery worker -Q default,events,notifications -l INFO
"""

import os

from celery import Celery
from kombu import Exchange, Queue

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

app = Celery('chamados')

# Broker, backend e serialização vêm de settings (prefixo CELERY_)
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
    Queue('notifications', Exchange('notifications'), routing_key='notifications.#'),
)

app.conf.task_default_queue = 'default'

app.conf.task_routes = {
    'src.adapters.django_app.events.handlers.dispatch_domain_event': {'queue': 'events'},
    'src.adapters.django_app.events.handlers.handle_*': {'queue': 'notifications'},
}

app.autodiscover_tasks(['src.adapters.django_app.events'], related_name='handlers')
