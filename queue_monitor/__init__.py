"""RabbitMQ queue monitor with threshold alerts and repeat suppression."""

__version__ = '1.0.0'
