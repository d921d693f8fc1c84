"""
Skillshare progress application code.

This package contains the service-specific implementations:
- progress: Plan progress models, service, pipelines, and router
- auth: Caller identity resolution
- config: Application settings

Uses generic infrastructure from the common/ package.
"""

from app.config import settings

__all__ = ["settings"]
