"""
gh-executor - GitHub issue executor plugin for Kubernetes chat bots.

Files a GitHub issue for a malfunctioning Kubernetes resource, attaching
its recent logs and the cluster version.
"""

__version__ = "1.0.0"
__author__ = "gh-executor Contributors"
