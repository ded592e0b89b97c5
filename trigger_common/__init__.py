"""
Trigger Common module.

This module contains the domain models shared by the GitLab client and the
trigger flow. It has no dependencies on other trigger_* modules, so it can
be imported by any component.
"""

from .models import Commit, Job, Pipeline, TriggerOutcome, TriggerResult

__all__ = ["Commit", "Job", "Pipeline", "TriggerOutcome", "TriggerResult"]
