"""Utility helper functions"""

from urllib.parse import quote


def format_number(value):
    """Format a stat for alert text, dropping '.0' on whole numbers"""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"


def build_queues_url(protocol, host, port, vhost=None):
    """Build the management API URL listing queues, optionally for one vhost"""
    url = f"{protocol}://{host}:{port}/api/queues"
    if vhost:
        url = f"{url}/{quote(vhost, safe='')}"
    return url
