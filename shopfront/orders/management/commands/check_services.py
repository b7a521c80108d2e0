"""
Команда для проверки доступности удалённых сервисов (auth, products, orders)
"""

import requests
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = 'Проверяет, что auth, products и orders сервисы отвечают по HTTP'

    def add_arguments(self, parser):
        parser.add_argument(
            '--path',
            type=str,
            help='Путь health-check эндпоинта',
            default='/health'
        )
        parser.add_argument(
            '--timeout',
            type=float,
            help='Таймаут запроса в секундах',
            default=None
        )

    def _services(self):
        return [
            ('auth', settings.AUTH_SERVICE_URL),
            ('products', settings.PRODUCTS_SERVICE_URL),
            ('orders', settings.ORDERS_SERVICE_URL),
        ]

    def handle(self, *args, **options):
        path = '/' + options['path'].lstrip('/')
        timeout = options['timeout'] or settings.API_TIMEOUT
        failed = []

        for name, base_url in self._services():
            url = f"{base_url.rstrip('/')}{path}"
            try:
                response = requests.get(url, timeout=timeout)
            except requests.exceptions.RequestException as e:
                failed.append(name)
                self.stdout.write(self.style.ERROR(f'FAIL {name:<9} {url} ({e})'))
                continue

            # Любой HTTP ответ кроме 5xx означает, что сервис поднят
            if response.status_code >= 500:
                failed.append(name)
                self.stdout.write(self.style.ERROR(f'FAIL {name:<9} {url} (HTTP {response.status_code})'))
            else:
                self.stdout.write(self.style.SUCCESS(f'OK   {name:<9} {url} (HTTP {response.status_code})'))

        if failed:
            raise CommandError(f'Недоступны: {", ".join(failed)}')
