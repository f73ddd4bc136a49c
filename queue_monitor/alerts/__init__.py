"""
Alert system module for the queue monitor.
"""

from queue_monitor.alerts.trigger import Direction, Trigger, load_triggers, parse_triggers
from queue_monitor.alerts.trigger_matcher import CandidateAlert, TriggerMatcher
from queue_monitor.alerts.dedup import DedupDecision, DedupGate, DedupKey
from queue_monitor.alerts.alert_manager import AlertManager

__all__ = [
    'Direction',
    'Trigger',
    'load_triggers',
    'parse_triggers',
    'CandidateAlert',
    'TriggerMatcher',
    'DedupDecision',
    'DedupGate',
    'DedupKey',
    'AlertManager',
]
