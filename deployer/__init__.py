"""
Contract Deployer Core Package
Handles the deployment workflow, its data model and error taxonomy
"""

from .exceptions import (
    DeploymentError,
    ConfigurationError,
    IdentityResolutionError,
    ArtifactResolutionError,
    SubmissionError,
    ConfirmationError
)
from .models import Signer, DeployedContract
from .orchestrator import DeploymentOrchestrator, DeploymentState

__all__ = [
    'DeploymentError',
    'ConfigurationError',
    'IdentityResolutionError',
    'ArtifactResolutionError',
    'SubmissionError',
    'ConfirmationError',
    'Signer',
    'DeployedContract',
    'DeploymentOrchestrator',
    'DeploymentState'
]
